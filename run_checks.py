from fastapi.testclient import TestClient
from app.main import app

client = TestClient(app)

print('ROOT:')
print(client.get('/').json())

print('\nHEALTH:')
print(client.get('/health').json())

print('\nSERVICE INFO:')
info = client.get('/location-priority/info').json()
print(info['service'])
print('facility types:', ', '.join(info['facility_types']))

print('\nPLACES HEALTH:')
try:
    resp = client.get('/health/places')
    print(resp.status_code)
    try:
        print(resp.json())
    except ValueError:
        print(resp.text)
except Exception as e:
    print('Places call raised exception:', e)

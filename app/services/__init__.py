"""
Services layer - Business logic goes here.
Keep services focused on specific domains.

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- places/: external places-directory clients (one HTTP call per query)
- location_priority/: the priority scoring engine built on top of them
"""

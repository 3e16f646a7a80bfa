"""
API route modules, one per collection.

Every router is mounted by src.api.main under /<prefix>/v<version>:
- sources, endpoints, authentications: full CRUD
- source_types, service_offerings, service_plans, service_instances, flavors,
  vms, container_images, tags: read-only inventory
- tasks: read plus update
- openapi.json: the versioned API document

Subcollections (e.g. /sources/{source_id}/vms) are registered on the router of
their primary collection.
"""

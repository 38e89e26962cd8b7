"""Client for the maquette image-to-3D service.

Uploads a photo once per requested variant and keeps the returned
artifacts (zip bundle, GLB scenes, PNG overlay) in local storage.
"""

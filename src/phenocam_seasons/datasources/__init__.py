"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants, pagination
    ├── models.py         # Dataclasses for parsed responses/files (optional)
    └── {feature}.py      # Fetch/parse functions (one per endpoint/concept)

Adding a new datasource
-----------------------
1. Create ``datasources/{name}/`` with files above. See ``phenocam/``.

2. Write fetch functions through the shared session::

       from phenocam_seasons.services.http import session

       def fetch_something(site: str) -> dict[str, Any]:
           resp = session.get(API_URL, params={...})
           resp.raise_for_status()
           return resp.json()

3. Re-export public API in ``__init__.py`` with ``__all__``.

4. Wire into the pipeline (see ``flows/fetch.py``):
   - Add a ``@task`` that calls your fetch function
   - Pick a store tier + path (e.g. ``reference/mycatalog.json``)
   - Call ``store.write(path, data, source="...", valid_until=...)``

5. Add tests in ``tests/test_{name}.py``.
"""

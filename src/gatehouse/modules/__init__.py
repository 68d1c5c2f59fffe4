"""Feature modules, mounted under ``/api/v1`` by discovery.

A module is a subpackage whose ``__init__`` only declares
``__module_info__`` and whose ``routes.py`` exposes ``router``. Keeping
routes out of the package ``__init__`` lets the permission stores import
``modules.users.models`` without pulling in the HTTP layer.
"""

from importlib import import_module
from pathlib import Path

import structlog
from fastapi import APIRouter


logger = structlog.get_logger()


def discover_modules() -> list[APIRouter]:
    """Import every module's ``routes`` and return their routers.

    Modules are visited in name order. Import errors propagate.
    """
    routers: list[APIRouter] = []

    for path in sorted(Path(__file__).parent.iterdir()):
        if path.name.startswith("_") or not (path / "routes.py").is_file():
            continue

        package = import_module(f"{__name__}.{path.name}")
        routes = import_module(f"{__name__}.{path.name}.routes")
        routers.append(routes.router)

        info = getattr(package, "__module_info__", {})
        logger.debug(
            "module_loaded",
            module=path.name,
            version=info.get("version"),
            dependencies=info.get("dependencies", []),
        )

    return routers

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

from kitchenunits import config
from kitchenunits.api.routes_quantities import router as quantities_router
from kitchenunits.observability import configure_logging
from kitchenunits.version import __version__

# -----------------------------------------------------------------------------
# App setup
# -----------------------------------------------------------------------------
configure_logging()

app = FastAPI(title=config.api_title(), version=__version__)
app.include_router(quantities_router)


@app.get("/health")
def health() -> Dict[str, Any]:
    return {"ok": True, "status": "ok", "version": __version__}


__all__ = ["app"]

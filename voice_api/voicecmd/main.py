from __future__ import annotations

from datetime import datetime

from fastapi import FastAPI, Depends, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .assistant import VoiceAssistant
from .commands import UnknownCatalogError, get_catalog, get_catalogs
from .config import settings
from .contacts import match_contact_name
from .intent import parse_complex_command
from .models import CommandCatalog, MatchResult
from .resolver import get_suggestions, match_command
from .security import require_api_key


app = FastAPI(title="BrailleWalk Voice Command API", version=__version__)

origins = (
    [o.strip() for o in settings.cors_origins.split(",")]
    if getattr(settings, "cors_origins", None)
    else ["*"]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins if origins != ["*"] else ["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

ASSISTANT = VoiceAssistant()


def _catalog_or_404(name: str) -> CommandCatalog:
    try:
        return get_catalog(name)
    except UnknownCatalogError:
        raise HTTPException(404, detail=f"Catalog not found: {name}")


@app.get("/health")
def health(response: Response):
    response.headers["Cache-Control"] = "no-store"
    return {
        "status": "ok",
        "service": "voicecmd-api",
        "version": __version__,
        "catalogs": len(get_catalogs()),
        "time": datetime.now().astimezone().isoformat()
    }


@app.get("/catalogs", dependencies=[Depends(require_api_key)])
def catalogs():
    return {"catalogs": {name: c.command_ids() for name, c in get_catalogs().items()}}


@app.get("/catalogs/{name}", dependencies=[Depends(require_api_key)])
def catalog_detail(name: str):
    return _catalog_or_404(name).model_dump()


@app.get("/match", dependencies=[Depends(require_api_key)])
def match(
    q: str = Query(..., min_length=1, description="Transcript to resolve"),
    catalog: str = Query(default="global"),
    threshold: float | None = Query(default=None, ge=0.0, le=1.0),
):
    cat = _catalog_or_404(catalog)
    cutoff = settings.threshold_for(catalog) if threshold is None else threshold
    result = match_command(q, cat, cutoff)
    if result is None:
        result = MatchResult(suggestions=get_suggestions(q, cat, settings.max_suggestions))
    return {"matched": result.command is not None, **result.model_dump()}


@app.get("/suggest", dependencies=[Depends(require_api_key)])
def suggest(
    q: str = Query(..., min_length=1),
    catalog: str = Query(default="global"),
    limit: int | None = Query(default=None, ge=0, le=50),
):
    cat = _catalog_or_404(catalog)
    n = settings.max_suggestions if limit is None else limit
    return {"q": q, "suggestions": get_suggestions(q, cat, n)}


@app.get("/contacts/match", dependencies=[Depends(require_api_key)])
def contacts_match(
    q: str = Query(..., min_length=1, description='Spoken request, e.g. "call lucy"'),
    names: list[str] = Query(..., description="Contact names to choose from"),
    threshold: float | None = Query(default=None, ge=0.0, le=1.0),
    by_token: bool = False,
):
    cutoff = settings.contact_threshold if threshold is None else threshold
    return match_contact_name(q, names, cutoff, by_token=by_token).model_dump()


@app.get("/parse", dependencies=[Depends(require_api_key)])
def parse(
    q: str = Query(..., min_length=1),
    catalog: str = Query(default="global"),
):
    return parse_complex_command(q, _catalog_or_404(catalog)).model_dump()


@app.get("/assistant", dependencies=[Depends(require_api_key)])
def assistant(
    q: str = Query(..., min_length=1, description="Command transcript"),
    catalog: str = Query(default="global", description="Catalog of the active screen"),
):
    _catalog_or_404(catalog)
    return ASSISTANT.run(transcript=q, catalog_name=catalog)

"""Song list lookups (no playback)."""
from fastapi import APIRouter, Depends, HTTPException

from musicard.api.routes.serializers import entry_to_dict
from musicard.api.state import AppState, get_state
from musicard.core.errors import CatalogMiss, ExtractionFailure
from musicard.models.song import SongCategory

router = APIRouter()


@router.get("/lookup")
def lookup_code(code: str, state: AppState = Depends(get_state)):
    """Resolve a raw scanned code to its song without playing it."""
    try:
        entry = state.catalog.lookup(code)
    except (ExtractionFailure, CatalogMiss) as e:
        raise HTTPException(status_code=404, detail=e.user_message)
    return entry_to_dict(entry)


@router.get("/{category}")
def list_category(category: SongCategory, state: AppState = Depends(get_state)):
    """Return how many songs a list holds."""
    return {"category": category.value, "count": len(state.catalog.entries(category))}


@router.get("/{category}/{id_}")
def get_entry(category: SongCategory, id_: int, state: AppState = Depends(get_state)):
    entry = state.catalog.resolve(category, id_)
    if entry is None:
        raise HTTPException(status_code=404, detail=CatalogMiss.user_message)
    return entry_to_dict(entry)

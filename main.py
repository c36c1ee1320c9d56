import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from library import assets
from library.level import compose_level_thumbnail, encode_png
from library.loader import ImageLoadError, load_image
from library.models import LevelQuery

# --- Environment & Config ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("level_thumbnail")
logger.info("[startup] Serving assets from %s", assets.ASSETS_DIR)

# --- App Init ---
app = FastAPI()
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["GET"],
    allow_headers=["*"],
)


def _error_payload(e: Exception) -> dict:
    """Serialise an exception into the JSON body of a 500 response."""
    if isinstance(e, ValidationError):
        return {
            "name": "ValidationError",
            "message": str(e),
            "errors": e.errors(include_url=False, include_context=False),
        }
    return {"name": type(e).__name__, "message": str(e)}


# --- Level Thumbnail Endpoint ---
@app.get("/api/level")
async def level_thumbnail(request: Request):
    """Render the 1280x720 PNG thumbnail for a level.

    Query parameters are ``thumbnail`` (URL, data URL or path of the
    background) and ``difficulty`` (numeric level selecting the badge).
    An unknown difficulty is the only client error reported as 400; every
    other failure, malformed query parameters included, is a 500 carrying
    the serialised error.
    """
    try:
        data = LevelQuery.model_validate(dict(request.query_params))

        background = await load_image(data.thumbnail)

        lvl_icon = assets.get_difficulty_icon(data.difficulty)
        if lvl_icon is None:
            return JSONResponse(status_code=400, content={"error": "Unknown difficulty"})

        canvas = compose_level_thumbnail(background, lvl_icon, assets.get_logo())
        return Response(content=encode_png(canvas), media_type="image/png")
    except ValidationError as e:
        logger.info("Rejected level thumbnail query: %s", e)
        return JSONResponse(status_code=500, content=_error_payload(e))
    except ImageLoadError as e:
        logger.warning("Background load failed: %s", e)
        return JSONResponse(status_code=500, content=_error_payload(e))
    except Exception as e:
        logger.exception("Level thumbnail rendering failed")
        return JSONResponse(status_code=500, content=_error_payload(e))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8080")))

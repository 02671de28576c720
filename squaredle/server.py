import logging
import time

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse

from squaredle.settings import Settings, settings

logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger("squaredle")


def create_app(cfg: Settings | None = None, loader=None) -> FastAPI:
    from contextlib import asynccontextmanager

    from squaredle.lexicon import LexiconLoader, load_lexicon

    cfg = cfg or settings
    loader = loader or LexiconLoader()

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        if loader.state == LexiconLoader.IDLE:
            logger.info("Loading dictionary from %s", cfg.dictionary_source)
            loader.start(load_lexicon, cfg.dictionary_source, cfg.HTTP_TIMEOUT)
        yield
        await loader.close()

    application = FastAPI(title="Squaredle Solver", lifespan=lifespan)
    application.state.settings = cfg
    application.state.loader = loader

    @application.get("/health")
    async def health():
        word_count = len(loader.lexicon) if loader.ready else 0
        return {"status": "ok", "lexicon": loader.state, "word_count": word_count}

    @application.post("/solve")
    async def solve(request: Request):
        from squaredle.display import group_by_length
        from squaredle.exceptions import LexiconNotReady
        from squaredle.grid import format_grid
        from squaredle.solver import solve as solve_grid

        data = await request.body()
        if not data:
            raise HTTPException(400, "Empty request body: no grid received")
        if len(data) > cfg.MAX_GRID_BYTES:
            raise HTTPException(413, f"Grid too large (max {cfg.MAX_GRID_BYTES} bytes)")

        content_type = request.headers.get("content-type", "")
        logger.info("POST /solve content-type=%s (%d bytes)", content_type, len(data))
        grid = _read_grid(data, content_type)
        if not grid:
            raise HTTPException(400, "Grid has no rows")

        try:
            lexicon = loader.lexicon
        except LexiconNotReady:
            if loader.state == LexiconLoader.FAILED:
                raise HTTPException(503, f"Dictionary failed to load: {loader.error}")
            raise HTTPException(503, "Dictionary is still loading. Please wait...",
                                headers={"Retry-After": "1"})

        t0 = time.perf_counter()
        results = solve_grid(grid, lexicon)
        elapsed_ms = round((time.perf_counter() - t0) * 1000, 1)

        results = [f for f in results if len(f.word) >= cfg.MIN_WORD_LENGTH]
        total = len(results)
        if cfg.MAX_RESULTS > 0:
            results = results[:cfg.MAX_RESULTS]
        logger.info("Grid %s: found %d words in %.1fms (returning %d)",
                    format_grid(grid).replace("\n", " / "), total, elapsed_ms, len(results))

        payload = {
            "rows": ["".join(row) for row in grid],
            "words": [{"word": f.word, "path": [list(p) for p in f.path]} for f in results],
            "groups": {
                str(length): [f.word for f in group]
                for length, group in group_by_length(results).items()
            },
            "word_count": total,
            "processing_time": elapsed_ms,
        }
        if cfg.DEBUG:
            _save_debug_artifacts(cfg, payload)
        return JSONResponse(payload)

    @application.get("/api/settings")
    async def api_get_settings():
        from squaredle.settings import get_editable_settings, EDITABLE_FIELDS
        values = get_editable_settings(cfg)
        field_types = {k: v.__name__ for k, v in EDITABLE_FIELDS.items()}
        return JSONResponse({"settings": values, "field_types": field_types})

    @application.post("/api/settings")
    async def api_post_settings(request: Request):
        import json
        from squaredle.settings import update_settings, get_editable_settings
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise HTTPException(400, "Settings body must be valid JSON")
        if not isinstance(body, dict):
            raise HTTPException(400, "Settings body must be a JSON object")
        errors = update_settings(cfg, **body)
        logging.getLogger().setLevel(cfg.LOG_LEVEL)
        if errors:
            return JSONResponse({"updated": get_editable_settings(cfg), "errors": errors}, status_code=400)
        logger.info("Settings updated: %s", body)
        return JSONResponse({"updated": get_editable_settings(cfg)})

    return application


def _read_grid(data: bytes, content_type: str):
    """Decode a request body into a grid: JSON ``{"grid": ...}`` or raw text."""
    import json
    from squaredle.grid import grid_from_rows, parse_grid

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(400, "Grid must be UTF-8 text")

    if not content_type.startswith("application/json"):
        return parse_grid(text)

    try:
        body = json.loads(text)
    except json.JSONDecodeError as exc:
        raise HTTPException(400, f"Invalid JSON: {exc.msg}")
    grid = body.get("grid") if isinstance(body, dict) else None
    if isinstance(grid, str):
        return parse_grid(grid)
    if isinstance(grid, list):
        try:
            return grid_from_rows(grid)
        except ValueError as exc:
            raise HTTPException(400, str(exc))
    raise HTTPException(400, "Body must contain a 'grid' string or list of rows")


def _save_debug_artifacts(cfg: Settings, payload: dict):
    import json
    from datetime import datetime

    debug_dir = cfg.BASE_DIR / "debug"
    debug_dir.mkdir(exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    with open(debug_dir / f"{ts}_result.json", "w") as f:
        json.dump({"timestamp": ts, **payload}, f, indent=2)
    logger.info("Saved debug artifacts to debug/%s_result.json", ts)


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)

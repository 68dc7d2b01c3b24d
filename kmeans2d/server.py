"""FastAPI application serving the K-means demo form.

Every request gets its own RandomState, so concurrent requests never
share a random source.
"""

import logging
import threading

import numpy as np
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse

from kmeans2d.config import RunConfig
from kmeans2d.pipeline import run_request

logger = logging.getLogger(__name__)

PAGE_HEADER = "<h1>K-means demo</h1>"

FORM_HTML = """<p>A tool for creating a 2D exhaustive partitional clustering using K-means and euclidian distance</p>
<form action='.' method='get'>
    <b>K</b>: <input type='text' name='k'></input><br/>
    <b>Points</b>: <input type='text' name='points'></input></br>
    <b>Max iterations</b> (0 defaults to infinite): <input type='text' name='limit' value='0'></input></br>
    <b>Normal distribution?</b> Leave these blank if you want an even
    distribution.</br />
    <b>Deviation X</b>: <input type='text' name='devx'></input>
    <b>Deviation Y</b>: <input type='text' name='devy'></input></br>
    <b>Mean X</b>: <input type='text' name='meanx'></input>
    <b>Mean Y</b>: <input type='text' name='meany'></input></br>
    <button type='submit'>Visualize!</button>
</form>"""


def create_app(seed: int | None = None) -> FastAPI:
    """
    Create the demo app. Request random sources are spawned from one
    SeedSequence, so a fixed seed makes the sequence of responses repeatable.
    """
    app = FastAPI(
        title="K-means demo",
        description="2D K-means clustering rendered as SVG",
        docs_url=None,
        redoc_url=None,
    )
    seeds = np.random.SeedSequence(seed)
    lock = threading.Lock()

    def next_random_state() -> np.random.RandomState:
        with lock:
            child = seeds.spawn(1)[0]
        return np.random.RandomState(child.generate_state(1)[0])

    @app.get("/", response_class=HTMLResponse)
    def kmeans_form(request: Request) -> HTMLResponse:
        config = RunConfig.from_form(request.query_params)
        logger.info(
            "Form request k=%d points=%d limit=%d normal=%s",
            config.k, config.points, config.limit, config.uses_normal,
        )
        body = run_request(config, random_state=next_random_state())
        return HTMLResponse(PAGE_HEADER + FORM_HTML + body)

    @app.get("/healthz")
    def healthz() -> dict:
        return {"status": "ok"}

    return app


def serve(host: str = "0.0.0.0", port: int = 8080, seed: int | None = None) -> None:
    import uvicorn

    logger.info("Serving K-means demo on http://%s:%d/", host, port)
    uvicorn.run(create_app(seed), host=host, port=port)

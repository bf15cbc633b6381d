from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, FastAPI, HTTPException
from pydantic import BaseModel, ValidationError
import structlog

from factor_finder.config import DEFAULT_CONFIG, EngineConfig
from factor_finder.errors import FactorFinderError
from factor_finder.models.commands import search_command_adapter
from factor_finder.models.events import TaskEvent, event_to_dict
from factor_finder.models.results import SearchResults
from factor_finder.numeric.bigint import digit_count, parse_bigint, power, to_decimal
from factor_finder.search_task import SearchTask, collect

log = structlog.get_logger()


class FactorModel(BaseModel):
    factor: str
    method: str


class SearchResponse(BaseModel):
    state: str
    n: Optional[str] = None
    events: List[Dict[str, Any]]
    factors: List[FactorModel]
    candidates: List[str]
    s_min: Optional[str] = None


class TargetResponse(BaseModel):
    n: str
    digits: int


def build_search_response(task: SearchTask, events: List[TaskEvent]) -> SearchResponse:
    """Fold a task's events into the response body, the same way an interactive caller accumulates them."""
    results = SearchResults()
    for event in events:
        results.apply(event)

    return SearchResponse(
        state=str(task.state),
        n=to_decimal(task.n) if task.n is not None else None,
        events=[event_to_dict(event) for event in events],
        factors=[FactorModel(factor=to_decimal(f.factor), method=str(f.method)) for f in results.factors],
        candidates=[to_decimal(s) for s in results.candidates],
        s_min=to_decimal(results.s_min) if results.s_min is not None else None,
    )


def create_app(config: EngineConfig = DEFAULT_CONFIG) -> FastAPI:
    app = FastAPI(title="Factor Finder API")
    router = APIRouter()

    @router.post("/search", response_model=SearchResponse)
    def search(payload: Dict[str, Any] = Body(...)):
        """Run one search to completion, or until the configured timeout cancels it."""
        try:
            command = search_command_adapter.validate_python(payload)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

        task = SearchTask(command, config=config).start()
        events = collect(task, timeout=config.api_timeout)
        log.info(
            "search finished",
            command=command.command,
            state=str(task.state),
            events=len(events),
        )
        return build_search_response(task, events)

    @router.get("/target", response_model=TargetResponse)
    def target(base: str, exponent: str, addend: str):
        """Compute N = base^exponent + addend."""
        try:
            n = power(parse_bigint(base, field="base"), parse_bigint(exponent, field="exponent"))
            n += parse_bigint(addend, field="addend")
            return TargetResponse(n=to_decimal(n), digits=digit_count(n))
        except FactorFinderError as e:
            log.warning("invalid target", kind=str(e.kind), detail=e.detail)
            raise HTTPException(status_code=400, detail={"kind": str(e.kind), "message": e.detail})

    app.include_router(router, prefix="/api")
    return app


app = create_app()

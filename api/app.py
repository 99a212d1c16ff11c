from __future__ import annotations
from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import logging, typing as t

# ---- Engine imports ----
from scoring_core import config
from scoring_core.audit_items import audit_items
from scoring_core.item_bank import sanitize_for_learner
from scoring_core.result_export import result_row, to_csv
from scoring_core.scoring import SUPPORTED_KINDS, score_item, score_items
from scoring_core.wire import ResponseIn, SingleResponseIn, WireItem

log = logging.getLogger(__name__)

app = FastAPI(title="Assessment Scoring API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

# ---- Schemas ----
class ScoreReq(BaseModel):
    item: WireItem
    response: SingleResponseIn | None = None

class BatchReq(BaseModel):
    items: list[WireItem]
    responses: list[ResponseIn] = []

class ItemReq(BaseModel):
    item: WireItem

class AuditReq(BaseModel):
    items: list[WireItem]

# ---- Helpers ----
def _serialize(row: dict[str, t.Any]) -> dict[str, t.Any]:
    return {
        "itemId": row["item_id"],
        "kind": row["kind"],
        "score": row["score"],
        "maxScore": row["max_score"],
        "deferred": row["deferred"],
    }


def _score_batch(req: BatchReq) -> list[dict[str, t.Any]]:
    items = [p.to_item() for p in req.items]
    results = score_items(items, [r.to_response() for r in req.responses])
    return [result_row(it, res) for it, res in zip(items, results)]

# ---- Health ----
@app.get("/")
def root():
    return {"status": "ok", "service": "assessment-scoring-api"}

@app.get("/health")
def health():
    return {"status": "ok", "kinds": list(SUPPORTED_KINDS), "debug_trace": config.DEBUG_TRACE}

# ---- Scoring ----
@app.post("/score")
def score(req: ScoreReq):
    item = req.item.to_item()
    response = req.response.to_response(item.id) if req.response is not None else None
    result = score_item(item, response)
    return _serialize(result_row(item, result))

@app.post("/score/batch")
def score_batch(req: BatchReq):
    rows = _score_batch(req)
    log.debug("scored batch of %d items", len(rows))
    return {"results": [_serialize(r) for r in rows]}

@app.post("/score/batch.csv")
def score_batch_csv(req: BatchReq):
    if not config.RESULT_EXPORT_ENABLED:
        raise HTTPException(404, "result export disabled")
    body = to_csv(_score_batch(req))
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=\"results.csv\""},
    )

# ---- Answer keys ----
@app.post("/items/sanitize")
def sanitize(req: ItemReq):
    return {"item": sanitize_for_learner(req.item.model_dump(by_alias=True, exclude_unset=True))}

@app.post("/items/audit")
def audit(req: AuditReq):
    return audit_items([p.to_item() for p in req.items])

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from ...store.json_store import StoreError
from .schemas import BatchReportPayload, FrequencyPayload, FrequencyRequest, RepairPayload, ValidationPayload
from .service import IntegrityService, SpotRejected

__all__ = ["create_integrity_router"]

_NOT_JSON = object()


async def _raw_body(request: Request) -> Any:
    """Parse the body as plain JSON; the validator reports shape problems itself."""

    raw = await request.body()
    try:
        return json.loads(raw) if raw else None
    except (UnicodeDecodeError, json.JSONDecodeError):
        return _NOT_JSON


class _IntegrityController:
    def __init__(self, service: IntegrityService) -> None:
        self.service = service

    def _json_response(self, data: dict[str, object], status_code: int = 200) -> JSONResponse:
        return JSONResponse(data, status_code=status_code)

    async def validate(self, request: Request) -> Response:
        spot = await _raw_body(request)
        if spot is _NOT_JSON:
            return self._json_response(ValidationPayload(ok=False, errors=["Spot must be valid JSON"]).to_dict())
        result = await self.service.validate_async(spot)
        return self._json_response(ValidationPayload.from_result(spot, result).to_dict())

    async def repair(self, request: Request) -> Response:
        spot = await _raw_body(request)
        if spot is _NOT_JSON:
            raise HTTPException(400, "Spot must be valid JSON")
        fixed = await self.service.repair_async(spot)
        result = await self.service.validate_async(fixed)
        payload = RepairPayload(
            spot=fixed,
            validation=ValidationPayload.from_result(fixed, result),
            changed=fixed != spot,
        )
        return self._json_response(payload.model_dump(by_alias=True))

    async def frequencies(self, body: FrequencyRequest) -> Response:
        freq = self.service.frequencies(body.hand_intent, body.turn_type, body.node_intent, body.num_options)
        payload = FrequencyPayload(
            hand_intent=body.hand_intent,
            turn_type=body.turn_type,
            node_intent=body.node_intent,
            freq=freq,
        )
        return self._json_response(payload.to_dict())

    async def report(self) -> Response:
        try:
            report = await self.service.validate_store_async()
        except StoreError as exc:
            raise HTTPException(500, str(exc)) from exc
        return self._json_response(BatchReportPayload.from_report(report).to_dict())

    async def spot(self, spot_id: str) -> Response:
        try:
            spot = await self.service.find_async(spot_id)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        except StoreError as exc:
            raise HTTPException(500, str(exc)) from exc
        return self._json_response(spot)

    async def commit(self, request: Request) -> Response:
        spot = await _raw_body(request)
        if spot is _NOT_JSON:
            raise HTTPException(400, "Spot must be valid JSON")
        try:
            spot_id = await self.service.commit_async(spot)
        except SpotRejected as exc:
            raise HTTPException(400, {"errors": list(exc.errors)}) from exc
        except StoreError as exc:
            raise HTTPException(500, str(exc)) from exc
        return self._json_response({"committed": spot_id}, status_code=201)


def create_integrity_router(service: IntegrityService) -> APIRouter:
    controller = _IntegrityController(service)
    router = APIRouter(prefix="/api/v1/spots", tags=["spots"])

    @router.post("/validate")
    async def validate_spot(request: Request) -> Response:
        return await controller.validate(request)

    @router.post("/repair")
    async def repair_spot(request: Request) -> Response:
        return await controller.repair(request)

    @router.post("/frequencies")
    async def lookup_frequencies(body: FrequencyRequest) -> Response:
        return await controller.frequencies(body)

    @router.get("/report")
    async def store_report() -> Response:
        return await controller.report()

    @router.post("/commit")
    async def commit_spot(request: Request) -> Response:
        return await controller.commit(request)

    @router.get("/{spot_id}")
    async def get_spot(spot_id: str) -> Response:
        return await controller.spot(spot_id)

    return router

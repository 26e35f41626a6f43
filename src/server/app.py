from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from dataclasses import asdict
from typing import Dict, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from dispatch import Dispatcher
from scheduler import CallStatus, Direction
from simulation import HallCallGenerator, Simulation

logger = logging.getLogger(__name__)


class HallCallRequest(BaseModel):
    floor: int
    direction: Direction


class AlgorithmSelection(BaseModel):
    name: str
    options: Dict[str, object] = {}


class SimulationManager:
    def __init__(
        self,
        floor_count: int = 10,
        car_count: int = 4,
        tick_interval: float = 1.0,
        arrival_rate: float = 0.0,
        max_generated_calls: Optional[int] = 1000,
    ) -> None:
        self.dispatcher = Dispatcher(floor_count=floor_count, car_count=car_count)
        generator = None
        if arrival_rate > 0:
            generator = HallCallGenerator(
                floor_count=floor_count,
                arrival_rate=arrival_rate,
                max_calls=max_generated_calls,
            )
        self.simulation = Simulation(self.dispatcher, generator=generator)
        self.tick_interval = tick_interval
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._tick_loop())
        logger.info(
            "Tick loop started: %d cars over %d floors, one tick every %.2fs",
            self.dispatcher.car_count,
            self.dispatcher.floor_count,
            self.tick_interval,
        )

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("Tick loop stopped at tick %d", self.dispatcher.current_tick)

    def tick(self) -> dict:
        """Run one simulation tick and return the state to publish."""

        served = self.simulation.step()
        if served:
            logger.debug("Tick %d served %d call(s)", self.dispatcher.current_tick, len(served))
        return self.current_state()

    async def _tick_loop(self) -> None:
        while True:
            await self.broadcast(self.tick())
            await asyncio.sleep(self.tick_interval)

    async def broadcast(self, payload: dict) -> None:
        if not self.clients:
            return
        message = json.dumps(payload)
        stale = []
        for client in list(self.clients):
            try:
                await client.send_text(message)
            except (WebSocketDisconnect, RuntimeError):
                stale.append(client)
        for client in stale:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        """Accept a stream client and send it the state it missed."""

        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        self.clients.discard(websocket)
        with contextlib.suppress(RuntimeError):
            await websocket.close()

    def current_state(self) -> dict:
        state = self.dispatcher.snapshot()
        state["metrics"] = asdict(self.simulation.metrics_snapshot())
        return state

    def receive_request(self, floor: int, direction: Direction) -> bool:
        if direction is Direction.IDLE:
            raise ValueError("A hall call must go up or down")
        if not 1 <= floor <= self.dispatcher.floor_count:
            raise ValueError(f"Floor {floor} is outside 1..{self.dispatcher.floor_count}")
        return self.dispatcher.receive_request(floor, direction)


manager = SimulationManager()
app = FastAPI(title="LiftBank Dispatch API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    await manager.start()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await manager.stop()


@app.get("/api/elevator/status")
async def get_status() -> dict:
    return manager.current_state()


@app.get("/api/elevator/calls")
async def get_calls(status: Optional[CallStatus] = None, direction: Optional[Direction] = None) -> dict:
    calls = manager.dispatcher.list_calls(status=status, direction=direction)
    return {"calls": [call.to_dict() for call in calls]}


@app.post("/api/elevator/request")
async def request_elevator(request: HallCallRequest) -> dict:
    try:
        accepted = manager.receive_request(request.floor, request.direction)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {
        "accepted": accepted,
        "floor": request.floor,
        "direction": request.direction.value,
    }


@app.post("/api/elevator/algorithm")
async def set_algorithm(selection: AlgorithmSelection) -> dict:
    try:
        manager.dispatcher.set_scheduler(selection.name, **selection.options)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return manager.current_state()


@app.websocket("/ws/stream")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.register(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)

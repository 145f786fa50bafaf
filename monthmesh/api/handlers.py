"""
API Handlers: /users Endpoints

Implements:
- GET /users: users registered inside the hot window
- POST /users: store one user and return the stored row

Success is 200 with JSON; any failure is 400 with the error text as
plain text. The POST body is decoded here rather than by a pydantic
model so malformed input is a 400, not FastAPI's 422.
"""

from __future__ import annotations

import json

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from monthmesh.storage.repositories import UserRepository
from monthmesh.storage.schema import User

router = APIRouter(tags=["users"])


def bad_request(message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=400)


def _repository(request: Request) -> UserRepository:
    return request.app.state.repository


@router.get("/users")
async def list_users(request: Request) -> Response:
    """
    Response:
        [{"id": 1, "name": "Alice", "registered_date": "2024-01-10"}, ...]
    """
    result = await _repository(request).list_hot_users()
    if result.is_err():
        return bad_request(str(result.error))
    return JSONResponse([user.to_dict() for user in result.unwrap()])


@router.post("/users")
async def create_user(request: Request) -> Response:
    """
    Request:
        {"id": 1, "name": "Alice", "registered_date": "2024-01-10"}
    """
    body = await request.body()
    if not body:
        return bad_request("Request body required")
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return bad_request(f"Invalid JSON: {e}")

    parsed = User.from_dict(data)
    if parsed.is_err():
        return bad_request(str(parsed.error))

    result = await _repository(request).create_user(parsed.unwrap())
    if result.is_err():
        return bad_request(str(result.error))
    return JSONResponse(result.unwrap().to_dict())

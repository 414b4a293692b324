# app/infrastructure/api/dependencies.py
from fastapi import Request

from app.infrastructure.container import Container


def get_container(request: Request) -> Container:
    return request.app.state.container

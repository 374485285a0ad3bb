# routes.py
from fastapi import FastAPI
from controller.prompt_controller import prompt_router
from controller.validation_controller import validation_router


def register_routes(app: FastAPI) -> None:
    """Register controllers here."""
    app.include_router(validation_router)
    app.include_router(prompt_router)

from fastapi import APIRouter

from llm_playground.api.v1.chat import router as chat_router
from llm_playground.api.v1.conversations import router as conversations_router
from llm_playground.api.v1.llm_configs import router as llm_configs_router

api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(llm_configs_router)
api_v1_router.include_router(chat_router)
api_v1_router.include_router(conversations_router)

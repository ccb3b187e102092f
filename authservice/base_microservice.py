import os
import logging
from fastapi.responses import JSONResponse
from typing import Any, Dict
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base

# Setup logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(message)s",
)
logger = logging.getLogger("microservice")

Base = declarative_base()

# --- SQLAlchemy async setup ---
def create_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(database_url, echo=False)

def create_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

async def init_models(engine: AsyncEngine) -> None:
    """
    Create all tables registered on Base.metadata that do not exist yet.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

class MCPResponse(JSONResponse):
    """
    Standard MCP protocol response for operational endpoints.
    """
    def __init__(self, data: Any = None, message: str = "success", status: str = "ok", **kwargs):
        content = {
            "status": status,
            "message": message,
            "data": data,
        }
        super().__init__(content=content, **kwargs)

class BaseMicroservice:
    """
    Base class for all microservices. Provides:
    - Error/event logging
    - MCP protocol response
    """
    def __init__(self):
        self.logger = logger

    def mcp_response(self, data: Any = None, message: str = "success", status: str = "ok"):
        """
        Return a standard MCP protocol response.
        """
        return MCPResponse(data=data, message=message, status=status)

    def log_event(self, event: str, details: Dict[str, Any] = None):
        self.logger.info(f"EVENT: {event} | Details: {details}")

    def log_error(self, error: Exception, context: str = ""):
        self.logger.error(f"ERROR: {str(error)} | Context: {context}")

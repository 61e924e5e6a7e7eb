import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.responses import RedirectResponse

from portal.auth.dependencies import get_current_user
from portal.auth.routes.api import auth_router, users_router
from portal.auth.utils import initialize_default_admin
from portal.chat.routes.api import router as chat_router
from portal.core.config import settings
from portal.core.db import sessionmanager
from portal.core.errors import register_exception_handlers
from portal.core.observability import init_observability
from portal.core.setup import initialize_workspace
from portal.git_analyser.routes.api import router as git_analyser_router
from portal.prompts.routes.api import router as prompts_router
from portal.prompts.utils import initialize_default_prompts
from portal.render.routes.api import router as render_router
from portal.usecases.routes.decomposition import router as decomposition_router
from portal.usecases.routes.documentation import router as documentation_router
from portal.vector_store.routes.api import router as vector_store_router
from portal.workflow.routes.api import router as workflow_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa
    """
    Ensures that the workspace directories exist, then seeds the default
    administrator and the default prompts.
    """
    initialize_workspace()

    # Initialize Observability (Arize Phoenix) if enabled
    if settings.OBSERVABILITY_ENABLED:
        init_observability()

    async with sessionmanager.session() as session:
        await initialize_default_admin(session)
        await initialize_default_prompts(session)

    yield

    await sessionmanager.cleanup()


app = FastAPI(lifespan=lifespan, title="Analyst Portal")

register_exception_handlers(app)

authenticated = [Depends(get_current_user)]

app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(users_router, prefix="/api/users", tags=["users"], dependencies=authenticated)
app.include_router(prompts_router, prefix="/api/prompts", tags=["prompts"], dependencies=authenticated)
app.include_router(vector_store_router, prefix="/api/vector-store", tags=["vector-store"], dependencies=authenticated)
app.include_router(render_router, prefix="/render", tags=["render"], dependencies=authenticated)
app.include_router(workflow_router, prefix="/workflow", tags=["workflow"], dependencies=authenticated)
app.include_router(
    decomposition_router, prefix="/api/usecase/decomposition", tags=["usecases"], dependencies=authenticated
)
app.include_router(
    documentation_router, prefix="/api/usecase/documentation", tags=["usecases"], dependencies=authenticated
)
app.include_router(chat_router, prefix="/api/chat", tags=["chat"], dependencies=authenticated)
app.include_router(git_analyser_router, prefix="/api/git-analyser", tags=["git-analyser"], dependencies=authenticated)


@app.get("/")
async def root():
    return RedirectResponse(url="/docs")

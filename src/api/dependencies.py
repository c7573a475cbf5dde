from fastapi import Depends, HTTPException

from adapter.auth.jwt_token_issuer import JwtTokenIssuer
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.sequence_counter import MongoSequenceCounter
from adapter.mongodb.task_repository import MongoTaskRepository
from adapter.mongodb.user_repository import MongoUserRepository
from port.sequence_counter import SequenceCounter
from port.task_repository import TaskRepository
from port.token_issuer import TokenIssuer
from port.user_repository import UserRepository
from services.operations import DomainOperations


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[DATABASE_NAME]


def get_sequence_counter() -> SequenceCounter:
    return MongoSequenceCounter(_get_db())


def get_user_repo(counter: SequenceCounter = Depends(get_sequence_counter)) -> UserRepository:
    return MongoUserRepository(_get_db(), counter)


def get_task_repo(counter: SequenceCounter = Depends(get_sequence_counter)) -> TaskRepository:
    return MongoTaskRepository(_get_db(), counter)


def get_token_issuer() -> TokenIssuer:
    return JwtTokenIssuer()


def get_operations(
    users: UserRepository = Depends(get_user_repo),
    tasks: TaskRepository = Depends(get_task_repo),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> DomainOperations:
    return DomainOperations(users, tasks, tokens)

"""GraphQL schema: one resolver per domain operation.

Resolvers only translate arguments and results; every rule lives in
DomainOperations.
"""

import logging
from typing import Optional

import strawberry
from strawberry.fastapi import GraphQLRouter
from strawberry.schema.config import StrawberryConfig
from strawberry.types import Info

from api.gql.context import domain_errors, get_graphql_context, operations, request_context
from api.gql.objects import (
    AuthPayload,
    CreateTaskInput,
    CreateUserInput,
    LoginInput,
    TaskType,
    UpdateTaskInput,
    UpdateUserInput,
    UserType,
)
from api.gql.scalars import DATETIME_SCALAR, DateTime
from services.task_service import DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)


@strawberry.type
class Query:
    @strawberry.field
    def users(self, info: Info) -> list[UserType]:
        with domain_errors():
            users = operations(info).list_users(request_context(info))
            return [UserType.from_domain(u) for u in users]

    @strawberry.field
    def user(self, info: Info, id: strawberry.ID) -> Optional[UserType]:
        with domain_errors():
            return UserType.from_domain(operations(info).get_user(str(id), request_context(info)))

    @strawberry.field(description="The caller's tasks, oldest first")
    def tasks(
        self,
        info: Info,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> list[TaskType]:
        with domain_errors():
            result = operations(info).list_tasks(request_context(info), page=page, limit=limit)
            return [TaskType.from_domain(t) for t in result.tasks]

    @strawberry.field
    def task(self, info: Info, id: strawberry.ID) -> Optional[TaskType]:
        with domain_errors():
            return TaskType.from_domain(operations(info).get_task(str(id), request_context(info)))

    @strawberry.field
    def me(self, info: Info) -> Optional[UserType]:
        with domain_errors():
            return UserType.from_domain(operations(info).me(request_context(info)))


@strawberry.type
class Mutation:
    @strawberry.mutation
    def create_user(self, info: Info, input: CreateUserInput) -> UserType:
        with domain_errors():
            user = operations(info).create_user(
                email=input.email,
                password=input.password,
                first_name=input.first_name,
                last_name=input.last_name,
            )
            return UserType.from_domain(user)

    @strawberry.mutation
    def update_user(self, info: Info, id: strawberry.ID, input: UpdateUserInput) -> UserType:
        with domain_errors():
            user = operations(info).update_user(str(id), input.to_changes(), request_context(info))
            return UserType.from_domain(user)

    @strawberry.mutation
    def delete_user(self, info: Info, id: strawberry.ID) -> bool:
        with domain_errors():
            return operations(info).delete_user(str(id), request_context(info))

    @strawberry.mutation
    def create_task(self, info: Info, input: CreateTaskInput) -> TaskType:
        with domain_errors():
            task = operations(info).create_task(input.to_draft(), request_context(info))
            return TaskType.from_domain(task)

    @strawberry.mutation
    def update_task(self, info: Info, id: strawberry.ID, input: UpdateTaskInput) -> TaskType:
        with domain_errors():
            task = operations(info).update_task(str(id), input.to_patch(), request_context(info))
            return TaskType.from_domain(task)

    @strawberry.mutation
    def delete_task(self, info: Info, id: strawberry.ID) -> bool:
        with domain_errors():
            return operations(info).delete_task(str(id), request_context(info))

    @strawberry.mutation
    def login(self, info: Info, input: LoginInput) -> AuthPayload:
        with domain_errors():
            session = operations(info).login(input.email, input.password)
            return AuthPayload(token=session.token, user=UserType.from_domain(session.user))

    @strawberry.mutation(description="Confirms the caller is authenticated; the client discards its token")
    def logout(self, info: Info) -> bool:
        with domain_errors():
            return operations(info).logout(request_context(info))


class TaskSchema(strawberry.Schema):
    def process_errors(self, errors, execution_context=None) -> None:
        # internal errors were already logged with their traceback in domain_errors()
        for error in errors:
            code = (error.extensions or {}).get("code")
            logger.info("GraphQL request rejected", extra={"code": code, "path": error.path})


schema = TaskSchema(
    query=Query,
    mutation=Mutation,
    config=StrawberryConfig(scalar_map={DateTime: DATETIME_SCALAR}),
)

graphql_router = GraphQLRouter(schema, context_getter=get_graphql_context)

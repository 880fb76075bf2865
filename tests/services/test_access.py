"""Access evaluation, the transaction scope and repository conflicts."""

from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from stackline.db.session import transaction
from stackline.errors import ConflictError, DuplicateRecordError, ForbiddenError, NotFoundError
from stackline.repositories import ProjectRepository, StackRepository, UserRepository
from stackline.services import AccessControl, StackService


async def make_user(session: AsyncSession, username: str):
    return await UserRepository(session).insert(
        email=f"{username}@example.com", username=username, password_hash="not-a-real-hash"
    )


@pytest.fixture
async def members(session: AsyncSession):
    async with transaction(session):
        owner = await make_user(session, "alice")
        collaborator = await make_user(session, "bob")
        outsider = await make_user(session, "mallory")
        projects = ProjectRepository(session)
        project = await projects.insert(name="Launch", owner_id=owner.id)
        await projects.add_collaborator(project.id, collaborator.id, invited_by=owner.id, role="collaborator")
    return project, owner, collaborator, outsider


async def test_has_access(session: AsyncSession, members):
    project, owner, collaborator, outsider = members
    access = AccessControl(session)

    assert await access.has_access(project.id, owner.id)
    assert await access.has_access(project.id, collaborator.id)
    assert not await access.has_access(project.id, outsider.id)
    assert not await access.has_access(uuid4(), owner.id)
    assert not await access.has_access(project.id, uuid4())


async def test_is_owner(session: AsyncSession, members):
    project, owner, collaborator, _ = members
    access = AccessControl(session)

    assert await access.is_owner(project.id, owner.id)
    assert not await access.is_owner(project.id, collaborator.id)
    assert not await access.is_owner(uuid4(), owner.id)


async def test_require_owner_hides_invisible_projects(session: AsyncSession, members):
    project, owner, collaborator, outsider = members
    access = AccessControl(session)

    assert (await access.require_owner(project.id, owner.id, "owner only")).id == project.id
    with pytest.raises(ForbiddenError, match="owner only"):
        await access.require_owner(project.id, collaborator.id, "owner only")
    with pytest.raises(NotFoundError, match="Project not found"):
        await access.require_owner(project.id, outsider.id, "owner only")


async def test_transaction_rolls_back_the_whole_unit(session: AsyncSession, members):
    project, owner, _, _ = members
    # Rollback expires loaded rows, so keep plain ids
    project_id, owner_id = project.id, owner.id
    stacks = StackRepository(session)

    with pytest.raises(RuntimeError):
        async with transaction(session):
            await stacks.insert(project_id=project_id, topic="Doomed", created_by=owner_id)
            async with transaction(session):
                await stacks.insert(project_id=project_id, topic="Also doomed", created_by=owner_id)
            raise RuntimeError("boom")

    assert await stacks.find_by_project(project_id) == []


async def test_nested_transaction_commits_once_at_the_outer_level(session: AsyncSession, members):
    project, owner, _, _ = members
    stacks = StackRepository(session)

    async with transaction(session):
        async with transaction(session):
            await stacks.insert(project_id=project.id, topic="Inner", created_by=owner.id)
        assert session.in_transaction()
        await stacks.insert(project_id=project.id, topic="Outer", created_by=owner.id)

    assert sorted(s.topic for s in await stacks.find_by_project(project.id)) == ["Inner", "Outer"]


async def test_unique_violation_becomes_duplicate_record(session: AsyncSession, members):
    project, owner, _, _ = members
    project_id, owner_id = project.id, owner.id
    stacks = StackRepository(session)

    async with transaction(session):
        await stacks.insert(project_id=project_id, topic="Competitors", created_by=owner_id)

    with pytest.raises(DuplicateRecordError):
        async with transaction(session):
            await stacks.insert(project_id=project_id, topic="Competitors", created_by=owner_id)

    assert [s.topic for s in await stacks.find_by_project(project_id)] == ["Competitors"]


async def test_duplicate_stack_topic_is_a_conflict(session: AsyncSession, members):
    project, owner, collaborator, _ = members
    service = StackService(session)

    await service.create_stack(project.id, owner.id, "Competitors")
    with pytest.raises(ConflictError):
        await service.create_stack(project.id, collaborator.id, " Competitors ")

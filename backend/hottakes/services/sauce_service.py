"""
HotTakes API: Sauce Service (Review Pipeline)
==============================================

What:  The domain side of every /api/reviews route.
How:   Each operation receives the caller's RequestContext and runs the
       pipeline stages in order. A failing stage raises a HotTakesError,
       which short-circuits to the terminal error handler.
Who:   Called by routes/sauces.py with a per-request SauceRepository.

Pipeline per operation:
    create:  validate SAUCE_REQUIRED → image required → store image →
             insert (owner = caller). A failed insert removes the image.
    read:    validate id → fetch or 404
    update:  validate id → check_ownership → validate SAUCE → store new
             image (optional) → update + commit → old image removed in
             the background
    delete:  validate id → check_ownership → delete + commit → image
             removed in the background
    vote:    validate id → validate VOTE → fetch or 404 → set_liking →
             write vote state + commit

Background removals are scheduled only after the commit succeeded, so a
failed write never loses the image the stored record still points to.
"""

import logging
from typing import Any, List, Optional, Protocol

from fastapi import BackgroundTasks

from hottakes.context import RequestContext
from hottakes.exceptions import FileUploadError, ForbiddenError
from hottakes.models.sauce import Sauce
from hottakes.schemas.sauce import MessageResponse, SauceRequired, SauceUpdate, VoteRequest, VoteResponse
from hottakes.services.file_service import IMAGES_URL_PATH, FileService, file_service
from hottakes.services.sauce_repository import SauceRepository
from hottakes.services.validation import SchemaName, validate, validate_id_parameter
from hottakes.services.voting import VoteAction, describe_transition, set_liking, vote_message

logger = logging.getLogger(__name__)


class UploadedImage(Protocol):
    """The part of starlette's UploadFile the pipeline relies on."""

    filename: Optional[str]
    content_type: Optional[str]

    async def read(self, size: int = -1) -> bytes: ...


async def check_ownership(
    ctx: RequestContext, sauce_id: str, repository: SauceRepository
) -> RequestContext:
    """
    Fetch the sauce and require the caller to own it.

    Returns:
        A new context carrying the loaded sauce, read by the mutation
        that follows instead of fetching the record again.

    Raises:
        NotFoundError:   no sauce with this id
        ForbiddenError:  the sauce belongs to another user
    """
    sauce = await repository.get(sauce_id)
    if sauce.user_id != ctx.user_id:
        logger.warning(
            "User %s denied access to sauce %s owned by %s",
            ctx.user_id,
            sauce.id,
            sauce.user_id,
        )
        raise ForbiddenError(context={"sauce_id": sauce.id, "user_id": ctx.user_id})
    return ctx.with_sauce(sauce)


class SauceService:
    """
    Stateless apart from its collaborators: one instance per request.

    Args:
        repository: SauceRepository bound to the request's session
        files:      Image storage (the module singleton unless overridden)
    """

    def __init__(self, repository: SauceRepository, files: FileService = file_service):
        self.repository = repository
        self.files = files

    def image_url(self, base_url: str, filename: str) -> str:
        return f"{base_url.rstrip('/')}{IMAGES_URL_PATH}{filename}"

    async def _store_image(self, image: UploadedImage) -> str:
        content = await image.read()
        extension = self.files.validate_upload(image.filename, image.content_type, len(content))
        return await self.files.store_file(content, extension)

    # ── Read ──────────────────────────────────────────────────────────────

    async def list_sauces(self, ctx: RequestContext) -> List[Sauce]:
        sauces = await self.repository.find()
        logger.debug("User %s listed %d sauces", ctx.user_id, len(sauces))
        return sauces

    async def get_sauce(self, ctx: RequestContext, sauce_id: str) -> Sauce:
        validate_id_parameter(sauce_id)
        return await self.repository.get(sauce_id)

    # ── Create ────────────────────────────────────────────────────────────

    async def create_sauce(
        self,
        ctx: RequestContext,
        payload: Any,
        image: Optional[UploadedImage],
        base_url: str,
    ) -> MessageResponse:
        """
        Create a sauce owned by the caller.

        Args:
            ctx:      Authenticated caller
            payload:  Parsed `sauce` form field
            image:    Uploaded `image` form field (required)
            base_url: Public base URL the image reference is built from

        Raises:
            ValidationFailedError, FileUploadError, PersistenceError
        """
        data: SauceRequired = validate(SchemaName.SAUCE_REQUIRED, payload)
        if image is None or not image.filename:
            raise FileUploadError()

        filename = await self._store_image(image)
        sauce = Sauce(
            user_id=ctx.user_id,
            name=data.name,
            manufacturer=data.manufacturer,
            description=data.description,
            main_pepper=data.main_pepper,
            heat=data.heat,
            image_url=self.image_url(base_url, filename),
            likes=0,
            dislikes=0,
            users_liked=[],
            users_disliked=[],
        )
        try:
            await self.repository.insert(sauce)
            await self.repository.commit()
        except Exception:
            await self.files.cleanup_file(filename)
            raise
        return MessageResponse(message="New sauce created!")

    # ── Update ────────────────────────────────────────────────────────────

    async def authorize(self, ctx: RequestContext, sauce_id: str) -> RequestContext:
        """Id validation then ownership: the stages shared by update and delete."""
        validate_id_parameter(sauce_id)
        return await check_ownership(ctx, sauce_id, self.repository)

    async def update_sauce(
        self,
        ctx: RequestContext,
        payload: Any,
        image: Optional[UploadedImage],
        base_url: str,
        background_tasks: BackgroundTasks,
    ) -> MessageResponse:
        """
        Update the sauce loaded by authorize(). Vote state is never touched.

        The previous image is removed in the background once the new
        reference is committed.
        """
        sauce = ctx.sauce
        if sauce is None:
            raise RuntimeError("update_sauce requires a context from authorize()")

        data: SauceUpdate = validate(SchemaName.SAUCE, payload)
        fields = data.changes()

        new_filename: Optional[str] = None
        old_filename: Optional[str] = None
        if image is not None and image.filename:
            new_filename = await self._store_image(image)
            old_filename = self.files.filename_from_url(sauce.image_url)
            fields["image_url"] = self.image_url(base_url, new_filename)

        try:
            await self.repository.update_fields(sauce, fields)
            await self.repository.commit()
        except Exception:
            await self.files.cleanup_file(new_filename)
            raise

        if old_filename and old_filename != new_filename:
            background_tasks.add_task(self.files.cleanup_file, old_filename)
        logger.info("Sauce %s updated by %s (%s)", sauce.id, ctx.user_id, ", ".join(fields) or "no changes")
        return MessageResponse(message="Sauce updated!")

    # ── Delete ────────────────────────────────────────────────────────────

    async def delete_sauce(
        self, ctx: RequestContext, background_tasks: BackgroundTasks
    ) -> MessageResponse:
        sauce = ctx.sauce
        if sauce is None:
            raise RuntimeError("delete_sauce requires a context from authorize()")

        filename = self.files.filename_from_url(sauce.image_url)
        await self.repository.delete(sauce)
        await self.repository.commit()

        if filename:
            background_tasks.add_task(self.files.cleanup_file, filename)
        return MessageResponse(message="Sauce deleted!")

    # ── Vote ──────────────────────────────────────────────────────────────

    async def vote(self, ctx: RequestContext, sauce_id: str, payload: Any) -> VoteResponse:
        """
        Apply the caller's like, dislike or reset to a sauce.

        The voter is always ctx.user_id; a userId in the payload is only
        format-checked.
        """
        validate_id_parameter(sauce_id)
        data: VoteRequest = validate(SchemaName.VOTE, payload)
        sauce = await self.repository.get(sauce_id)

        state = sauce.vote_state
        new_state, transition = set_liking(state, VoteAction(data.like), ctx.user_id)
        if new_state != state:
            sauce.apply_vote_state(new_state)
            await self.repository.commit()

        return VoteResponse(
            message=vote_message(transition),
            outcome=describe_transition(transition).value,
            previous_action=int(transition.previous_action),
            new_action=int(transition.new_action),
            likes=new_state.likes,
            dislikes=new_state.dislikes,
        )

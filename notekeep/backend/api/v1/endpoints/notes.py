"""
Notes API Endpoints.

REST API endpoints for the signed-in user's notes.
"""

from fastapi import APIRouter, Query

from notekeep.backend.core.dependencies import CurrentUser, Notes, RequestId
from notekeep.backend.schemas.base import ApiResponse, ResponseMetadata
from notekeep.backend.schemas.note import NoteCreate, NoteResponse, NoteUpdate

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes",
    description=(
        "List notes, most recently modified first. "
        "search takes precedence over pinned, which takes precedence over folder_id."
    ),
)
def list_notes(
    user: CurrentUser,
    service: Notes,
    request_id: RequestId,
    folder_id: str | None = Query(default=None, description="Only notes in this folder"),
    pinned: bool = Query(default=False, description="Only pinned notes"),
    search: str | None = Query(
        default=None,
        max_length=200,
        description="Case-insensitive match on title, content or tags",
    ),
) -> ApiResponse[list[NoteResponse]]:
    """List the user's notes."""
    notes = service.list_notes(user.id, folder_id=folder_id, pinned=pinned, search=search)
    return ApiResponse(
        data=[NoteResponse.model_validate(note) for note in notes],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
)
def create_note(
    data: NoteCreate,
    user: CurrentUser,
    service: Notes,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    note = service.create_note(user.id, data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
)
def get_note(
    note_id: str,
    user: CurrentUser,
    service: Notes,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Get a note by ID."""
    note = service.get_note(user.id, note_id)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.patch(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Update an existing note. Only provided fields are updated.",
)
@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    include_in_schema=False,
)
def update_note(
    note_id: str,
    data: NoteUpdate,
    user: CurrentUser,
    service: Notes,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Update a note."""
    note = service.update_note(user.id, note_id, data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{note_id}",
    status_code=204,
    summary="Delete a note",
    description="Permanently delete a note. Deleting an unknown id succeeds.",
)
def delete_note(
    note_id: str,
    user: CurrentUser,
    service: Notes,
) -> None:
    """Delete a note."""
    service.delete_note(user.id, note_id)

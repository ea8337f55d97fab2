"""
Folders API Endpoints.
"""

from fastapi import APIRouter

from notekeep.backend.core.dependencies import CurrentUser, Folders, RequestId
from notekeep.backend.schemas.base import ApiResponse, ResponseMetadata
from notekeep.backend.schemas.folder import FolderCreate, FolderResponse, FolderUpdate

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[FolderResponse]],
    summary="List folders",
)
def list_folders(
    user: CurrentUser,
    service: Folders,
    request_id: RequestId,
) -> ApiResponse[list[FolderResponse]]:
    """List the user's folders, oldest first."""
    folders = service.list_folders(user.id)
    return ApiResponse(
        data=[FolderResponse.model_validate(folder) for folder in folders],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[FolderResponse],
    status_code=201,
    summary="Create a folder",
)
def create_folder(
    data: FolderCreate,
    user: CurrentUser,
    service: Folders,
    request_id: RequestId,
) -> ApiResponse[FolderResponse]:
    folder = service.create_folder(user.id, data)
    return ApiResponse(
        data=FolderResponse.model_validate(folder),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{folder_id}",
    response_model=ApiResponse[FolderResponse],
    summary="Get a folder",
)
def get_folder(
    folder_id: str,
    user: CurrentUser,
    service: Folders,
    request_id: RequestId,
) -> ApiResponse[FolderResponse]:
    folder = service.get_folder(user.id, folder_id)
    return ApiResponse(
        data=FolderResponse.model_validate(folder),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.patch(
    "/{folder_id}",
    response_model=ApiResponse[FolderResponse],
    summary="Update a folder",
    description="Rename, re-label or move a folder. Only provided fields are updated.",
)
@router.put(
    "/{folder_id}",
    response_model=ApiResponse[FolderResponse],
    include_in_schema=False,
)
def update_folder(
    folder_id: str,
    data: FolderUpdate,
    user: CurrentUser,
    service: Folders,
    request_id: RequestId,
) -> ApiResponse[FolderResponse]:
    folder = service.update_folder(user.id, folder_id, data)
    return ApiResponse(
        data=FolderResponse.model_validate(folder),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{folder_id}",
    status_code=204,
    summary="Delete a folder",
    description=(
        "Delete a folder and the notes filed directly in it. "
        "Subfolders are kept. Deleting an unknown id succeeds."
    ),
)
def delete_folder(
    folder_id: str,
    user: CurrentUser,
    service: Folders,
) -> None:
    service.delete_folder(user.id, folder_id)

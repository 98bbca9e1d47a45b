"""HR catalog endpoints: segmentations, users and folders"""
from fastapi import APIRouter, HTTPException, Depends
import logging
from ...config import settings
from ...exceptions import HumandAPIError
from ...models.response import UsersRequest
from ...services import HumandClient
from ...api.dependencies import get_humand_client

logger = logging.getLogger(__name__)
router = APIRouter(tags=["catalog"])


@router.get("/segmentations")
async def list_segmentations(
    client: HumandClient = Depends(get_humand_client)
):
    """List segmentation groups with their selectable items"""
    try:
        segmentations = await client.get_segmentations()

        stats = {
            "total_groups": len(segmentations),
            "total_items": sum(len(group.items) for group in segmentations),
            "total_users": sum(item.user_count for group in segmentations for item in group.items),
        }
        return {
            "success": True,
            "data": [group.model_dump() for group in segmentations],
            "stats": stats,
        }
    except HumandAPIError as e:
        logger.error(f"Error fetching segmentations: {e}")
        raise HTTPException(status_code=502, detail=f"Error fetching segmentations: {e.message}")
    except Exception as e:
        logger.error(f"Error fetching segmentations: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching segmentations: {str(e)}")


@router.post("/users")
async def list_users(
    request: UsersRequest,
    client: HumandClient = Depends(get_humand_client)
):
    """
    List unique users of the selected segmentation items

    An optional limit truncates the list; stats still report the full count.
    """
    if not request.segmentation_item_ids:
        raise HTTPException(status_code=400, detail="At least one segmentation item id is required")
    if len(request.segmentation_item_ids) > settings.max_users_per_batch:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {settings.max_users_per_batch} segmentation items per request"
        )

    try:
        users = await client.get_users_for_segmentations(request.segmentation_item_ids)
        limited = users[:request.limit] if request.limit and request.limit > 0 else users

        stats = {
            "total_users": len(users),
            "returned_users": len(limited),
            "segmentations_requested": len(request.segmentation_item_ids),
            "has_more": len(limited) < len(users),
        }
        data = [
            {**user.model_dump(), "full_name": user.full_name, "display_name": user.label}
            for user in limited
        ]
        return {"success": True, "data": data, "stats": stats}
    except HumandAPIError as e:
        logger.error(f"Error fetching users: {e}")
        raise HTTPException(status_code=502, detail=f"Error fetching users: {e.message}")
    except Exception as e:
        logger.error(f"Error fetching users: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching users: {str(e)}")


@router.get("/folders")
async def list_folders(
    client: HumandClient = Depends(get_humand_client)
):
    """List destination folders, sorted by name"""
    try:
        folders = await client.get_folders()
        folders = sorted(folders, key=lambda folder: (folder.name or "").lower())

        stats = {
            "total_folders": len(folders),
            "folders_with_parent": sum(1 for f in folders if f.parent_id),
            "root_folders": sum(1 for f in folders if not f.parent_id),
        }
        return {
            "success": True,
            "data": [folder.model_dump() for folder in folders],
            "stats": stats,
        }
    except HumandAPIError as e:
        logger.error(f"Error fetching folders: {e}")
        raise HTTPException(status_code=502, detail=f"Error fetching folders: {e.message}")
    except Exception as e:
        logger.error(f"Error fetching folders: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching folders: {str(e)}")

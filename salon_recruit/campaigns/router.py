from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from salon_recruit.campaigns.schemas import CampaignCreate, CampaignResponse
from salon_recruit.campaigns.service import (
    activate_campaign,
    create_campaign,
    deactivate_campaign,
    delete_campaign,
    get_active_campaign,
    get_campaign_by_id,
    get_campaigns,
)
from salon_recruit.database import get_db
from salon_recruit.dependencies import require_admin

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


@router.get("", response_model=list[CampaignResponse])
async def list_campaigns(
    _=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    campaigns = await get_campaigns(db)
    return [CampaignResponse.model_validate(c) for c in campaigns]


@router.post("", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
async def create(
    data: CampaignCreate,
    _=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    campaign = await create_campaign(db, data.name)
    return CampaignResponse.model_validate(campaign)


# Public: the kiosk shows which campaign it is collecting for
@router.get("/active", response_model=CampaignResponse)
async def active(db: AsyncSession = Depends(get_db)):
    campaign = await get_active_campaign(db)
    return CampaignResponse.model_validate(campaign)


@router.get("/{campaign_id}", response_model=CampaignResponse)
async def get(
    campaign_id: int,
    _=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    campaign = await get_campaign_by_id(db, campaign_id)
    if not campaign:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Campaign not found")
    return CampaignResponse.model_validate(campaign)


@router.post("/{campaign_id}/activate", response_model=CampaignResponse)
async def activate(
    campaign_id: int,
    _=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    campaign = await activate_campaign(db, campaign_id)
    return CampaignResponse.model_validate(campaign)


@router.post("/{campaign_id}/deactivate", response_model=CampaignResponse)
async def deactivate(
    campaign_id: int,
    _=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    campaign = await deactivate_campaign(db, campaign_id)
    return CampaignResponse.model_validate(campaign)


@router.delete("/{campaign_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete(
    campaign_id: int,
    _=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await delete_campaign(db, campaign_id)

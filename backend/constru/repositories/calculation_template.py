from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from constru.domain.ports import CalculationTemplateRepository
from constru.models.calculation_template import CalculationTemplate
from constru.schemas.template import CalculationTemplateOut, TemplateCreate


class SqlAlchemyCalculationTemplateRepository(CalculationTemplateRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, template_id: str) -> CalculationTemplateOut | None:
        row = await self.session.get(CalculationTemplate, template_id)
        return CalculationTemplateOut.model_validate(row) if row else None

    async def find_by_ids(self, template_ids: list[str]) -> dict[str, CalculationTemplateOut]:
        if not template_ids:
            return {}
        r = await self.session.execute(
            select(CalculationTemplate).where(CalculationTemplate.id.in_(template_ids))
        )
        return {row.id: CalculationTemplateOut.model_validate(row) for row in r.scalars().all()}

    async def create(self, data: TemplateCreate, created_by: str | None = None) -> CalculationTemplateOut:
        row = CalculationTemplate(**data.model_dump(), created_by=created_by)
        self.session.add(row)
        await self.session.flush()
        await self.session.refresh(row)
        return CalculationTemplateOut.model_validate(row)

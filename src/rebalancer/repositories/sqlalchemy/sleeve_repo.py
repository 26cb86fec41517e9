"""SQLAlchemy implementations of SleeveRepository and AllocationModelRepository."""

from typing import Optional

from sqlalchemy.orm import Session

from rebalancer.core.timezone import to_eastern
from rebalancer.domain.models import AllocationModel, ModelMember, Sleeve, SleeveMember
from rebalancer.repositories.sqlalchemy.orm_models import (
    AllocationModelORM,
    ModelMemberORM,
    SleeveMemberORM,
    SleeveORM,
)


class SqlAlchemySleeveRepository:
    """SQLAlchemy-backed sleeve repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, sleeve: Sleeve) -> Sleeve:
        """Persist a new sleeve with its members."""
        orm_sleeve = SleeveORM(
            sleeve_id=sleeve.sleeve_id,
            name=sleeve.name,
            is_active=sleeve.is_active,
            members=[self._member_to_orm(m) for m in sleeve.members],
        )
        self._db.add(orm_sleeve)
        self._db.commit()
        self._db.refresh(orm_sleeve)
        return self._to_domain(orm_sleeve)

    def get_by_id(self, sleeve_id: str) -> Optional[Sleeve]:
        orm_sleeve = self._db.get(SleeveORM, sleeve_id)
        return self._to_domain(orm_sleeve) if orm_sleeve else None

    def get_by_name(self, name: str) -> Optional[Sleeve]:
        orm_sleeve = self._db.query(SleeveORM).filter(SleeveORM.name == name).first()
        return self._to_domain(orm_sleeve) if orm_sleeve else None

    def list_all(self) -> list[Sleeve]:
        """List all sleeves ordered by name."""
        orm_sleeves = self._db.query(SleeveORM).order_by(SleeveORM.name).all()
        return [self._to_domain(s) for s in orm_sleeves]

    def update(self, sleeve: Sleeve) -> Sleeve:
        """Replace a sleeve's name, flags and members."""
        orm_sleeve = self._db.get(SleeveORM, sleeve.sleeve_id)
        if not orm_sleeve:
            raise ValueError(f"Sleeve not found: {sleeve.sleeve_id}")
        orm_sleeve.name = sleeve.name
        orm_sleeve.is_active = sleeve.is_active
        orm_sleeve.members.clear()
        # Flush removals first so re-added tickers don't collide on (sleeve_id, ticker)
        self._db.flush()
        orm_sleeve.members.extend(self._member_to_orm(m) for m in sleeve.members)
        self._db.commit()
        self._db.refresh(orm_sleeve)
        return self._to_domain(orm_sleeve)

    def delete(self, sleeve_id: str) -> None:
        orm_sleeve = self._db.get(SleeveORM, sleeve_id)
        if orm_sleeve:
            self._db.delete(orm_sleeve)
            self._db.commit()

    @staticmethod
    def _member_to_orm(member: SleeveMember) -> SleeveMemberORM:
        return SleeveMemberORM(
            ticker=member.ticker,
            rank=member.rank,
            is_active=member.is_active,
            is_legacy=member.is_legacy,
        )

    @staticmethod
    def _to_domain(orm: SleeveORM) -> Sleeve:
        """Convert ORM model to domain model."""
        return Sleeve(
            sleeve_id=orm.sleeve_id,
            name=orm.name,
            is_active=orm.is_active,
            members=[
                SleeveMember(
                    ticker=m.ticker,
                    rank=m.rank,
                    is_active=m.is_active,
                    is_legacy=m.is_legacy,
                )
                for m in orm.members
            ],
        )


class SqlAlchemyAllocationModelRepository:
    """SQLAlchemy-backed allocation model repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, model: AllocationModel) -> AllocationModel:
        orm_model = AllocationModelORM(
            model_id=model.model_id,
            name=model.name,
            description=model.description,
            members=self._members_to_orm(model.members),
        )
        self._db.add(orm_model)
        self._db.commit()
        self._db.refresh(orm_model)
        return self._to_domain(orm_model)

    def get_by_id(self, model_id: str) -> Optional[AllocationModel]:
        orm_model = self._db.get(AllocationModelORM, model_id)
        return self._to_domain(orm_model) if orm_model else None

    def get_by_name(self, name: str) -> Optional[AllocationModel]:
        orm_model = self._db.query(AllocationModelORM).filter(
            AllocationModelORM.name == name
        ).first()
        return self._to_domain(orm_model) if orm_model else None

    def list_all(self) -> list[AllocationModel]:
        orm_models = self._db.query(AllocationModelORM).order_by(AllocationModelORM.name).all()
        return [self._to_domain(m) for m in orm_models]

    def update(self, model: AllocationModel) -> AllocationModel:
        """Replace a model's name, description and members."""
        orm_model = self._db.get(AllocationModelORM, model.model_id)
        if not orm_model:
            raise ValueError(f"Model not found: {model.model_id}")
        orm_model.name = model.name
        orm_model.description = model.description
        orm_model.members.clear()
        self._db.flush()
        orm_model.members.extend(self._members_to_orm(model.members))
        self._db.commit()
        self._db.refresh(orm_model)
        return self._to_domain(orm_model)

    def delete(self, model_id: str) -> None:
        orm_model = self._db.get(AllocationModelORM, model_id)
        if orm_model:
            self._db.delete(orm_model)
            self._db.commit()

    @staticmethod
    def _members_to_orm(members: list[ModelMember]) -> list[ModelMemberORM]:
        return [
            ModelMemberORM(
                sleeve_id=m.sleeve_id,
                target_weight_bps=m.target_weight_bps,
                is_active=m.is_active,
                position=index,
            )
            for index, m in enumerate(members)
        ]

    @staticmethod
    def _to_domain(orm: AllocationModelORM) -> AllocationModel:
        """Convert ORM model to domain model."""
        return AllocationModel(
            model_id=orm.model_id,
            name=orm.name,
            description=orm.description or "",
            updated_at_est=to_eastern(orm.updated_at_est) if orm.updated_at_est else None,
            members=[
                ModelMember(
                    sleeve_id=m.sleeve_id,
                    target_weight_bps=m.target_weight_bps,
                    is_active=m.is_active,
                )
                for m in orm.members
            ],
        )

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.infrastructure.db.database import Base


class ResourceTypeRow(Base):
    __tablename__ = "resource_types"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)

    resources = relationship("ResourceRow", back_populates="resource_type")

    def __repr__(self):
        return f"<ResourceType(id={self.id}, name={self.name})>"


class ResourceRow(Base):
    __tablename__ = "resources"

    id = Column(Integer, primary_key=True, index=True)
    resource_type_id = Column(Integer, ForeignKey("resource_types.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    is_bookable = Column(Boolean, nullable=False, default=True)

    resource_type = relationship("ResourceTypeRow", back_populates="resources")
    bookings = relationship("BookingRow", back_populates="resource", order_by="BookingRow.id")

    def __repr__(self):
        return f"<Resource(id={self.id}, type={self.resource_type_id}, name={self.name})>"


class BookingRow(Base):
    __tablename__ = "bookings"
    # one booking per resource, day and slot
    __table_args__ = (
        UniqueConstraint("resource_id", "date", "time_slot", name="uq_booking_resource_date_slot"),
    )

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, index=True)
    time_slot = Column(String, nullable=False)  # canonical "08-10"
    user_id = Column(String, nullable=False, index=True)
    resource_type_id = Column(Integer, ForeignKey("resource_types.id"), nullable=False)
    resource_id = Column(Integer, ForeignKey("resources.id"), nullable=False)

    resource = relationship("ResourceRow", back_populates="bookings")

    def __repr__(self):
        return f"<Booking(id={self.id}, date={self.date}, slot={self.time_slot}, resource={self.resource_id})>"

"""
Merchant Model
A single outlet of a vendor, with the location used for geospatial search
"""
from sqlalchemy import Column, String, Boolean, DateTime, Float, Integer, Numeric, ForeignKey
from sqlalchemy.orm import relationship
import uuid
import enum
from datetime import datetime
from foodhub.database import Base


class OperationalStatus(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"
    BUSY = "busy"
    TEMPORARILY_CLOSED = "temporarily_closed"


class Merchant(Base):
    __tablename__ = "merchants"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    vendor_id = Column(String(36), ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True)
    outlet_name = Column(String(255), nullable=False, index=True)
    street_address = Column(String(500), nullable=True)
    city = Column(String(100), nullable=True)

    # Location
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    delivery_radius_meters = Column(Integer, nullable=True)

    # Status
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    is_accepting_orders = Column(Boolean, default=True, nullable=False)
    operational_status = Column(String(50), default=OperationalStatus.OPEN.value, nullable=False)
    average_rating = Column(Numeric(3, 2), default=0, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    vendor = relationship("Vendor", back_populates="merchants")
    merchant_products = relationship("MerchantProduct", back_populates="merchant", cascade="all, delete-orphan")

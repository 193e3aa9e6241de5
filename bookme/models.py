from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import relationship

from .database import Base


class Role:
    CLIENT = "CLIENT"
    BARBER = "BARBER"
    ADMIN = "ADMIN"


class AppointmentStatus:
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"

    # Statuses that hold a slot
    ACTIVE = (PENDING, CONFIRMED)


class PaymentStatus:
    PENDING = "PENDING"
    PAID = "PAID"
    REFUNDED = "REFUNDED"


DAYS_OF_WEEK = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY")

# Partial-index predicate for "at most one live booking per slot"
_ACTIVE_SLOT_PREDICATE = text("status IN ('PENDING', 'CONFIRMED')")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=True)  # bcrypt hash
    phone = Column(String(50), nullable=True)
    role = Column(String(20), default=Role.CLIENT, nullable=False)  # CLIENT, BARBER, ADMIN
    image = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    barber = relationship("Barber", back_populates="user", uselist=False)
    push_subscriptions = relationship(
        "PushSubscription", back_populates="user", cascade="all, delete-orphan"
    )


class Barber(Base):
    __tablename__ = "barbers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    bio = Column(Text, nullable=True)
    specialties = Column(JSON, default=list)
    hourly_rate = Column(Float, nullable=True)
    profile_image = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    gender = Column(String(20), default="UNISEX")  # MALE, FEMALE, UNISEX

    # Social links
    facebook_url = Column(String(500), nullable=True)
    instagram_url = Column(String(500), nullable=True)
    twitter_url = Column(String(500), nullable=True)
    tiktok_url = Column(String(500), nullable=True)
    youtube_url = Column(String(500), nullable=True)
    whatsapp_url = Column(String(500), nullable=True)

    # Payment handles shown to clients
    zelle_email = Column(String(255), nullable=True)
    zelle_phone = Column(String(50), nullable=True)
    cashapp_tag = Column(String(100), nullable=True)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    user = relationship("User", back_populates="barber")
    availability = relationship(
        "Availability", back_populates="barber", cascade="all, delete-orphan"
    )
    days_off = relationship("DayOff", back_populates="barber", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="barber")


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    image = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    gender = Column(String(20), default="UNISEX")
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class Availability(Base):
    """Weekly recurring schedule, one row per barber and weekday"""

    __tablename__ = "availability"
    __table_args__ = (UniqueConstraint("barber_id", "day_of_week", name="uq_availability_day"),)

    id = Column(Integer, primary_key=True, index=True)
    barber_id = Column(Integer, ForeignKey("barbers.id"), nullable=False, index=True)
    day_of_week = Column(String(10), nullable=False)  # MONDAY..SUNDAY
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)  # HH:MM
    is_available = Column(Boolean, default=True, nullable=False)

    barber = relationship("Barber", back_populates="availability")


class DayOff(Base):
    __tablename__ = "days_off"
    __table_args__ = (UniqueConstraint("barber_id", "date", name="uq_day_off"),)

    id = Column(Integer, primary_key=True, index=True)
    barber_id = Column(Integer, ForeignKey("barbers.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    reason = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.now)

    barber = relationship("Barber", back_populates="days_off")


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index(
            "uq_appointments_active_slot",
            "barber_id",
            "date",
            "time",
            unique=True,
            postgresql_where=_ACTIVE_SLOT_PREDICATE,
            sqlite_where=_ACTIVE_SLOT_PREDICATE,
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    barber_id = Column(Integer, ForeignKey("barbers.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(5), nullable=False)  # HH:MM, naive local time
    status = Column(String(20), default=AppointmentStatus.PENDING, nullable=False)

    # Payment
    payment_status = Column(String(20), default=PaymentStatus.PENDING, nullable=False)
    payment_method = Column(String(50), nullable=True)
    payment_reference = Column(String(255), nullable=True)

    notes = Column(Text, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    cancellation_reason = Column(String(500), nullable=True)

    # Reminder idempotency markers, one per lookahead window
    notification_24h_sent = Column(Boolean, default=False, nullable=False)
    notification_12h_sent = Column(Boolean, default=False, nullable=False)
    notification_2h_sent = Column(Boolean, default=False, nullable=False)
    notification_30m_sent = Column(Boolean, default=False, nullable=False)
    thank_you_sent = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    client = relationship("User", foreign_keys=[client_id])
    barber = relationship("Barber")
    service = relationship("Service")
    review = relationship("Review", back_populates="appointment", uselist=False)

    @property
    def starts_at(self) -> datetime:
        """Appointment start as a naive local datetime (date + HH:MM)"""
        hours, minutes = (int(part) for part in self.time.split(":"))
        return datetime(self.date.year, self.date.month, self.date.day, hours, minutes)


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), unique=True, nullable=False)
    client_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    barber_id = Column(Integer, ForeignKey("barbers.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1-5
    comment = Column(Text, nullable=True)
    admin_response = Column(Text, nullable=True)
    admin_responded_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.now)

    appointment = relationship("Appointment", back_populates="review")
    client = relationship("User")
    barber = relationship("Barber", back_populates="reviews")


class Settings(Base):
    """Shop-wide settings; a single row"""

    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    shop_name = Column(String(255), default="BookMe", nullable=False)
    address = Column(String(500), default="")
    phone = Column(String(50), default="")
    email = Column(String(255), default="")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    facebook = Column(String(500), nullable=True)
    instagram = Column(String(500), nullable=True)
    twitter = Column(String(500), nullable=True)
    tiktok = Column(String(500), nullable=True)
    youtube = Column(String(500), nullable=True)
    whatsapp = Column(String(500), nullable=True)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    author_type = Column(String(20), nullable=False)  # BARBER, CLIENT
    barber_id = Column(Integer, ForeignKey("barbers.id"), nullable=True)
    caption = Column(Text, nullable=True)
    image_url = Column(String(1000), nullable=True)
    cloud_storage_path = Column(String(500), nullable=True)
    post_type = Column(String(20), default="IMAGE")
    hashtags = Column(JSON, default=list)
    status = Column(String(20), default="PENDING", nullable=False)  # PENDING, APPROVED, REJECTED
    view_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    author = relationship("User")
    likes = relationship("PostLike", back_populates="post", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan")


class PostLike(Base):
    __tablename__ = "post_likes"
    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_post_like"),)

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    post = relationship("Post", back_populates="likes")


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    parent_id = Column(Integer, ForeignKey("comments.id"), nullable=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    post = relationship("Post", back_populates="comments")
    author = relationship("User")
    parent = relationship("Comment", remote_side=[id])


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    recipient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    subject = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime, nullable=True)
    attachment_path = Column(String(500), nullable=True)  # private storage key
    attachment_name = Column(String(255), nullable=True)
    attachment_type = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.now)

    sender = relationship("User", foreign_keys=[sender_id])
    recipient = relationship("User", foreign_keys=[recipient_id])


class Notification(Base):
    """In-app notification feed entry"""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    link = Column(String(500), nullable=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="SET NULL"), nullable=True)
    comment_id = Column(Integer, ForeignKey("comments.id", ondelete="SET NULL"), nullable=True)
    actor_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.now)


class PushSubscription(Base):
    __tablename__ = "push_subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    endpoint = Column(String(1000), unique=True, nullable=False)
    p256dh = Column(String(255), nullable=False)
    auth = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    user = relationship("User", back_populates="push_subscriptions")


class GalleryImage(Base):
    """Showcase photo curated by the shop"""

    __tablename__ = "gallery_images"

    id = Column(Integer, primary_key=True, index=True)
    cloud_storage_path = Column(String(500), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    order = Column(Integer, default=0, nullable=False)
    is_public = Column(Boolean, default=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    gender = Column(String(20), nullable=True)  # MALE, FEMALE, UNISEX
    tags = Column(JSON, default=list)
    barber_id = Column(Integer, ForeignKey("barbers.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    barber = relationship("Barber")
    likes = relationship("GalleryLike", back_populates="image", cascade="all, delete-orphan")


class GalleryLike(Base):
    __tablename__ = "gallery_likes"
    __table_args__ = (UniqueConstraint("image_id", "user_id", name="uq_gallery_like"),)

    id = Column(Integer, primary_key=True, index=True)
    image_id = Column(Integer, ForeignKey("gallery_images.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    image = relationship("GalleryImage", back_populates="likes")

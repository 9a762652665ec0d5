from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Schema version this application knows how to write to
SUPPORTED_MODEL = "0.1.0"


# Database models
class AlertGroupRow(Base):
    """One received webhook."""
    __tablename__ = "AlertGroup"

    id = Column("ID", Integer, primary_key=True, autoincrement=True)
    time = Column("time", DateTime, nullable=False)  # set by the database at insert time
    receiver = Column("receiver", String(100), nullable=False)
    status = Column("status", String(50), nullable=False)
    external_url = Column("externalURL", Text, nullable=False)
    group_key = Column("groupKey", String(255), nullable=False)


class GroupLabelRow(Base):
    __tablename__ = "GroupLabel"

    id = Column("ID", Integer, primary_key=True, autoincrement=True)
    alert_group_id = Column("AlertGroupID", Integer, ForeignKey("AlertGroup.ID", ondelete="CASCADE"), nullable=False)
    label = Column("GroupLabel", String(100), nullable=False)
    value = Column("Value", String(1000), nullable=False)


class CommonLabelRow(Base):
    __tablename__ = "CommonLabel"

    id = Column("ID", Integer, primary_key=True, autoincrement=True)
    alert_group_id = Column("AlertGroupID", Integer, ForeignKey("AlertGroup.ID", ondelete="CASCADE"), nullable=False)
    label = Column("Label", String(100), nullable=False)
    value = Column("Value", String(1000), nullable=False)


class CommonAnnotationRow(Base):
    __tablename__ = "CommonAnnotation"

    id = Column("ID", Integer, primary_key=True, autoincrement=True)
    alert_group_id = Column("AlertGroupID", Integer, ForeignKey("AlertGroup.ID", ondelete="CASCADE"), nullable=False)
    annotation = Column("Annotation", String(100), nullable=False)
    value = Column("Value", Text, nullable=False)


class AlertRow(Base):
    """One alert of a received webhook."""
    __tablename__ = "Alert"

    id = Column("ID", Integer, primary_key=True, autoincrement=True)
    alert_group_id = Column("alertGroupID", Integer, ForeignKey("AlertGroup.ID", ondelete="CASCADE"), nullable=False)
    status = Column("status", String(50), nullable=False)
    starts_at = Column("startsAt", DateTime, nullable=False)
    ends_at = Column("endsAt", DateTime, nullable=True)  # NULL while the alert is open
    generator_url = Column("generatorURL", Text, nullable=False)
    fingerprint = Column("fingerprint", Text, nullable=False)


class AlertLabelRow(Base):
    __tablename__ = "AlertLabel"

    id = Column("ID", Integer, primary_key=True, autoincrement=True)
    alert_id = Column("AlertID", Integer, ForeignKey("Alert.ID", ondelete="CASCADE"), nullable=False)
    label = Column("Label", String(100), nullable=False)
    value = Column("Value", String(1000), nullable=False)


class AlertAnnotationRow(Base):
    __tablename__ = "AlertAnnotation"

    id = Column("ID", Integer, primary_key=True, autoincrement=True)
    alert_id = Column("AlertID", Integer, ForeignKey("Alert.ID", ondelete="CASCADE"), nullable=False)
    annotation = Column("Annotation", String(100), nullable=False)
    value = Column("Value", Text, nullable=False)


class ModelVersion(Base):
    """Schema version marker, written by whoever created the schema."""
    __tablename__ = "Model"

    id = Column("ID", Integer, primary_key=True, autoincrement=True)
    version = Column("version", String(20), nullable=False)

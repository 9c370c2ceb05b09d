"""
Database schema and connection management.

Uses SQLite with SQLAlchemy. Payslips and job postings are populated by
upstream pipelines; SalaryBench only reads them and writes reports.
"""

import enum
from datetime import datetime
from pathlib import Path
from sqlalchemy import (
    create_engine,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    Numeric,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

Base = declarative_base()


class ReportStatus(str, enum.Enum):
    """Lifecycle of a report row."""

    DRAFT = "draft"
    AWAITING_DATA = "awaiting_data"
    COMPLETED = "completed"


payslip_report = Table(
    "payslip_report",
    Base.metadata,
    Column("payslip_id", Integer, ForeignKey("payslips.id", ondelete="CASCADE"), primary_key=True),
    Column("report_id", Integer, ForeignKey("reports.id", ondelete="CASCADE"), primary_key=True),
)

job_posting_skill = Table(
    "job_posting_skill",
    Base.metadata,
    Column("job_posting_id", Integer, ForeignKey("job_postings.id", ondelete="CASCADE"), primary_key=True),
    Column("skill_id", Integer, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True),
)


class Region(Base):
    """Geographic region. Regions share a coarser statistical group."""

    __tablename__ = "regions"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    statistical_group = Column(String(50), nullable=True)


class JobTitle(Base):
    __tablename__ = "job_titles"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    name_en = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)


class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)


class Payslip(Base):
    """Verified historical salary data point."""

    __tablename__ = "payslips"

    id = Column(Integer, primary_key=True)
    job_title_id = Column(Integer, ForeignKey("job_titles.id", ondelete="SET NULL"), nullable=True)
    region_id = Column(Integer, ForeignKey("regions.id", ondelete="SET NULL"), nullable=True)
    experience = Column(Integer, nullable=False, default=0)
    salary = Column(Integer, nullable=True)  # monthly base salary
    company_pension = Column(Integer, nullable=True)  # employer contribution, monthly
    salary_supplement = Column(Integer, nullable=True)
    hours_monthly = Column(Numeric(6, 2), nullable=True)
    uploaded_at = Column(DateTime, nullable=False, default=datetime.now)
    verified_at = Column(DateTime, nullable=True)
    denied_at = Column(DateTime, nullable=True)

    job_title = relationship("JobTitle")
    region = relationship("Region")

    __table_args__ = (
        Index("ix_payslips_title_region_experience", "job_title_id", "region_id", "experience"),
    )

    @property
    def total_salary(self):
        """Monthly salary including employer pension; None without a base salary."""
        if self.salary is None:
            return None
        return self.salary + (self.company_pension or 0)


class JobPosting(Base):
    """External job listing."""

    __tablename__ = "job_postings"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    job_title_id = Column(Integer, ForeignKey("job_titles.id", ondelete="CASCADE"), nullable=True)
    region_id = Column(Integer, ForeignKey("regions.id", ondelete="SET NULL"), nullable=True)
    salary_from = Column(Integer, nullable=True)
    salary_to = Column(Integer, nullable=True)
    minimum_experience = Column(Integer, nullable=True)
    source = Column(String, nullable=False)  # feed the posting was scraped from
    url = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    skills = relationship("Skill", secondary=job_posting_skill)

    __table_args__ = (
        Index("ix_job_postings_title_source", "job_title_id", "source"),
    )


class ReportJobPosting(Base):
    """Scored association between a report and a job posting."""

    __tablename__ = "report_job_posting"

    report_id = Column(Integer, ForeignKey("reports.id", ondelete="CASCADE"), primary_key=True)
    job_posting_id = Column(Integer, ForeignKey("job_postings.id", ondelete="CASCADE"), primary_key=True)
    match_score = Column(Integer, nullable=False, default=0)

    job_posting = relationship("JobPosting")


class Report(Base):
    """A salary benchmark request and, once finalized, its result."""

    __tablename__ = "reports"

    id = Column(Integer, primary_key=True)
    job_title_id = Column(Integer, ForeignKey("job_titles.id", ondelete="CASCADE"), nullable=True)
    region_id = Column(Integer, ForeignKey("regions.id", ondelete="SET NULL"), nullable=True)
    experience = Column(Integer, nullable=False, default=0)
    uploaded_payslip_id = Column(Integer, ForeignKey("payslips.id", ondelete="SET NULL"), nullable=True)
    filters = Column(JSON, nullable=True)  # {"skill_ids": [...]}

    status = Column(String, nullable=False, default=ReportStatus.DRAFT.value)
    lower_percentile = Column(Integer, nullable=True)
    median = Column(Integer, nullable=True)
    upper_percentile = Column(Integer, nullable=True)
    payslip_match = Column(String, nullable=True)
    match_metadata = Column(JSON, nullable=True)
    description = Column(Text, nullable=True)
    conclusion = Column(Text, nullable=True)
    active_job_postings_count = Column(Integer, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    job_title = relationship("JobTitle")
    region = relationship("Region")
    payslips = relationship("Payslip", secondary=payslip_report, order_by="Payslip.id")
    job_postings = relationship(
        "ReportJobPosting",
        cascade="all, delete-orphan",
        order_by="ReportJobPosting.job_posting_id",
    )

    @property
    def skill_ids(self):
        return list((self.filters or {}).get("skill_ids") or [])


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()

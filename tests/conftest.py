"""
Pytest configuration and shared fixtures.
"""

import os

os.environ.setdefault("SALARYBENCH_LOG_TO_FILE", "false")

import pytest
from datetime import datetime
from typing import Dict, Any

from salarybench.config import Settings
from salarybench.database import (
    JobPosting,
    JobTitle,
    Payslip,
    Region,
    Report,
    Skill,
    init_database,
    get_session,
)
from storage.repositories.base import PayslipRecord, PostingRecord


@pytest.fixture
def settings() -> Settings:
    """Default settings without file logging."""
    return Settings(log_to_file=False)


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "test.db"
    init_database(path)
    return path


@pytest.fixture
def db_session(db_path):
    """Create a temporary database and return a session."""
    session = get_session(db_path)
    yield session
    session.close()


@pytest.fixture
def reference_data(db_session) -> Dict[str, Any]:
    """Regions, job titles and skills shared by most database tests."""
    regions = {
        "copenhagen": Region(name="Storkøbenhavn", statistical_group="Hovedstaden"),
        "zealand": Region(name="Øvrige Sjælland & Øer", statistical_group="Sjælland & Øer"),
        "aarhus": Region(name="Østjylland", statistical_group="Vestdanmark (Jylland & Fyn)"),
        "funen": Region(name="Fyn", statistical_group="Vestdanmark (Jylland & Fyn)"),
    }
    job_titles = {
        "developer": JobTitle(name="Softwareudvikler", name_en="Software Developer"),
        "designer": JobTitle(name="UX Designer", name_en="UX Designer"),
    }
    skills = {
        name: Skill(name=name)
        for name in ("python", "django", "sql", "docker", "figma")
    }
    db_session.add_all(list(regions.values()) + list(job_titles.values()) + list(skills.values()))
    db_session.commit()
    return {"regions": regions, "job_titles": job_titles, "skills": skills}


@pytest.fixture
def add_payslip(db_session, reference_data):
    """Factory adding a verified payslip."""

    def _add(
        experience: int,
        salary,
        region: str = "copenhagen",
        job_title: str = "developer",
        pension: int = 0,
        verified: bool = True,
    ) -> Payslip:
        payslip = Payslip(
            job_title_id=reference_data["job_titles"][job_title].id if job_title else None,
            region_id=reference_data["regions"][region].id if region else None,
            experience=experience,
            salary=salary,
            company_pension=pension,
            verified_at=datetime(2025, 11, 20) if verified else None,
        )
        db_session.add(payslip)
        db_session.commit()
        return payslip

    return _add


@pytest.fixture
def add_posting(db_session, reference_data):
    """Factory adding a job posting."""

    def _add(
        region: str = "copenhagen",
        minimum_experience=None,
        skills=(),
        salary_from=45000,
        job_title: str = "developer",
        source: str = "thehub.io",
    ) -> JobPosting:
        posting = JobPosting(
            title="Backend Developer",
            job_title_id=reference_data["job_titles"][job_title].id,
            region_id=reference_data["regions"][region].id if region else None,
            minimum_experience=minimum_experience,
            salary_from=salary_from,
            source=source,
            url="https://thehub.io/jobs/example",
            skills=[reference_data["skills"][s] for s in skills],
        )
        db_session.add(posting)
        db_session.commit()
        return posting

    return _add


@pytest.fixture
def add_report(db_session, reference_data):
    """Factory adding a draft report."""

    def _add(
        experience: int,
        region: str = "copenhagen",
        job_title: str = "developer",
        skills=(),
        uploaded_payslip_id=None,
    ) -> Report:
        report = Report(
            job_title_id=reference_data["job_titles"][job_title].id if job_title else None,
            region_id=reference_data["regions"][region].id if region else None,
            experience=experience,
            uploaded_payslip_id=uploaded_payslip_id,
            filters={"skill_ids": [reference_data["skills"][s].id for s in skills]},
        )
        db_session.add(report)
        db_session.commit()
        return report

    return _add


def payslip_record(
    id: int,
    experience: int,
    salary: int,
    group: str = "Hovedstaden",
    region_id: int = 1,
    job_title_id: int = 1,
) -> PayslipRecord:
    """Build an in-memory payslip record."""
    return PayslipRecord(
        id=id,
        region_id=region_id,
        experience=experience,
        total_salary=salary,
        job_title_id=job_title_id,
        statistical_group=group,
    )


def posting_record(
    id: int,
    region_id=1,
    minimum_experience=None,
    skill_ids=(),
    salary_from: int = 45000,
    job_title_id: int = 1,
    source: str = "thehub.io",
) -> PostingRecord:
    """Build an in-memory job posting record."""
    return PostingRecord(
        id=id,
        region_id=region_id,
        minimum_experience=minimum_experience,
        salary_from=salary_from,
        skill_ids=frozenset(skill_ids),
        job_title_id=job_title_id,
        source=source,
    )

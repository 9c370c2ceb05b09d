"""
Tests for database.py - SQLite schema and repositories.
"""

from datetime import datetime
from sqlalchemy import inspect

from salarybench.database import (
    JobPosting,
    Payslip,
    Report,
    ReportJobPosting,
    ReportStatus,
    init_database,
    get_session,
)
from storage.repositories.base import ScoredPosting
from storage.repositories.sql import (
    SqlJobPostingRepository,
    SqlPayslipRepository,
    SqlReportRepository,
)


class TestDatabaseInit:
    """Test database initialization."""

    def test_init_creates_database_file(self, tmp_path):
        """Test that init_database creates the database file."""
        db_path = tmp_path / "test.db"
        assert not db_path.exists()

        init_database(db_path)

        assert db_path.exists()

    def test_init_creates_tables(self, tmp_path):
        """Every table exists and starts empty."""
        db_path = tmp_path / "test.db"
        init_database(db_path)

        session = get_session(db_path)
        assert session.query(Payslip).count() == 0
        assert session.query(Report).count() == 0
        assert session.query(JobPosting).count() == 0
        session.close()

    def test_init_creates_parent_directories(self, tmp_path):
        """Test that init_database creates parent directories if missing."""
        db_path = tmp_path / "nested" / "dir" / "test.db"
        assert not db_path.parent.exists()

        init_database(db_path)

        assert db_path.exists()

    def test_matching_index(self, db_session):
        """Tier queries are indexed on (job title, region, experience)."""
        indexes = {
            ix["name"]: ix["column_names"]
            for ix in inspect(db_session.get_bind()).get_indexes("payslips")
        }

        assert indexes["ix_payslips_title_region_experience"] == [
            "job_title_id", "region_id", "experience",
        ]


class TestModels:

    def test_total_salary(self):
        assert Payslip(salary=40000, company_pension=3600).total_salary == 43600
        assert Payslip(salary=40000).total_salary == 40000
        assert Payslip(salary=None, company_pension=3600).total_salary is None

    def test_report_defaults(self, db_session, add_report):
        report = add_report(experience=4)

        assert report.status == ReportStatus.DRAFT.value
        assert report.created_at is not None
        assert report.conclusion is None

    def test_skill_ids(self):
        assert Report(filters={"skill_ids": [3, 1]}).skill_ids == [3, 1]
        assert Report(filters=None).skill_ids == []


class TestSqlRepositories:

    def test_list_eligible_filters(self, db_session, reference_data, add_payslip):
        developer = reference_data["job_titles"]["developer"].id
        kept = add_payslip(experience=5, salary=41000)
        add_payslip(experience=12, salary=61000)
        add_payslip(experience=5, salary=39000, region="aarhus")

        repo = SqlPayslipRepository(db_session)
        rows = repo.list_eligible(
            developer,
            statistical_group="Hovedstaden",
            experience_min=4,
            experience_max=9,
        )

        assert [r.id for r in rows] == [kept.id]
        assert rows[0].statistical_group == "Hovedstaden"

    def test_list_eligible_without_region(self, db_session, reference_data, add_payslip):
        add_payslip(experience=5, salary=41000, region=None)
        repo = SqlPayslipRepository(db_session)

        rows = repo.list_eligible(reference_data["job_titles"]["developer"].id)

        assert len(rows) == 1
        assert rows[0].statistical_group is None

    def test_postings_need_salary_floor(self, db_session, reference_data, add_posting):
        add_posting(skills=("python", "sql"))
        add_posting(salary_from=None)
        repo = SqlJobPostingRepository(db_session)
        developer = reference_data["job_titles"]["developer"].id

        rows = repo.list_scorable(developer)

        assert len(rows) == 1
        assert rows[0].skill_ids == frozenset(
            reference_data["skills"][s].id for s in ("python", "sql")
        )
        assert repo.count_from_source(developer, "thehub.io") == 2
        assert repo.count_from_source(developer, "jobindex.dk") == 0

    def test_replace_payslips(self, db_session, add_payslip, add_report):
        first = add_payslip(experience=5, salary=41000)
        second = add_payslip(experience=6, salary=43000)
        report = add_report(experience=5)
        repo = SqlReportRepository(db_session)

        repo.replace_payslips(report, [first.id, second.id])
        db_session.commit()
        repo.replace_payslips(report, [second.id])
        db_session.commit()
        db_session.refresh(report)

        assert [p.id for p in report.payslips] == [second.id]

    def test_replace_job_postings(self, db_session, add_posting, add_report):
        posting = add_posting()
        report = add_report(experience=5)
        repo = SqlReportRepository(db_session)

        repo.replace_job_postings(report, [ScoredPosting(posting.id, 3)])
        db_session.commit()
        repo.replace_job_postings(report, [ScoredPosting(posting.id, 8)])
        db_session.commit()

        assert db_session.query(ReportJobPosting).count() == 1
        assert db_session.query(ReportJobPosting).one().match_score == 8

    def test_list_by_status(self, db_session, add_report):
        draft = add_report(experience=1)
        done = add_report(experience=2)
        done.status = ReportStatus.COMPLETED.value
        done.updated_at = datetime.now()
        db_session.commit()

        repo = SqlReportRepository(db_session)

        assert repo.list_by_status("draft") == [draft]
        assert repo.get(done.id) is done
        assert repo.get(999) is None

# Overview: Pytest coverage for the flask CLI command groups.

from dealership.services import people_service, vehicle_service


class TestSystemCommands:
    def test_seed_once(self, app, db_session):
        runner = app.test_cli_runner()

        result = runner.invoke(args=["system", "seed"])
        assert result.exit_code == 0
        assert "PASS Seeded" in result.output
        assert len(people_service.list_people()) == 3
        assert vehicle_service.get_vehicle_by_plate("ABC-1234")["status"] == "AVAILABLE"

        again = runner.invoke(args=["system", "seed"])
        assert "SKIP" in again.output
        assert len(vehicle_service.list_vehicles()) == 2

    def test_reset_requires_confirmation(self, app, db_session):
        result = app.test_cli_runner().invoke(args=["system", "reset-db"])
        assert result.exit_code == 1
        assert "FAIL" in result.output


class TestReportCommands:
    def test_dashboard(self, app, db_session, vehicle):
        result = app.test_cli_runner().invoke(args=["reports", "dashboard"])
        assert result.exit_code == 0
        assert "1 available" in result.output

    def test_monthly_rows(self, app, db_session):
        result = app.test_cli_runner().invoke(args=["reports", "monthly", "--months", "3"])
        assert result.exit_code == 0
        assert len(result.output.strip().splitlines()) == 4

    def test_monthly_out_of_range(self, app, db_session):
        result = app.test_cli_runner().invoke(args=["reports", "monthly", "--months", "0"])
        assert result.exit_code == 1

from __future__ import annotations

from suidex.application.dto.export_snapshot import ExportSnapshotOutput
from suidex.scripts import export_snapshot


class FakeExportUseCase:
    def __init__(self, total_pools: int):
        self.total_pools = total_pools
        self.commands = []

    async def execute(self, command):
        self.commands.append(command)
        return ExportSnapshotOutput(
            location="out.json",
            mode=command.mode or "defillama",
            total_pools=self.total_pools,
            fetch_status={"Cetus": "success"},
        )


def test_parser_defaults_to_configured_mode_and_path():
    args = export_snapshot.build_parser().parse_args([])
    assert args.mode is None
    assert args.output is None


def test_main_passes_flags_and_reports_success(monkeypatch):
    use_case = FakeExportUseCase(total_pools=12)
    requested_paths = []

    def fake_builder(output_path=None):
        requested_paths.append(output_path)
        return use_case

    monkeypatch.setattr(export_snapshot, "get_export_snapshot_use_case", fake_builder)

    code = export_snapshot.main(["--mode", "graphql", "--output", "snap.json"])

    assert code == 0
    assert requested_paths == ["snap.json"]
    assert use_case.commands[0].mode == "graphql"


def test_main_exits_non_zero_when_nothing_was_exported(monkeypatch):
    monkeypatch.setattr(export_snapshot, "get_export_snapshot_use_case", lambda output_path=None: FakeExportUseCase(0))

    assert export_snapshot.main([]) == 1

import pytest

from ghost_protocol.main import build_parser, main


class TestParser:
    def test_register_arguments(self) -> None:
        args = build_parser().parse_args([
            "register",
            "tale.txt",
            "--creator",
            "Bram Stoker",
            "--deceased",
            "--death-year",
            "1912",
            "--beneficiary",
            "0x01:Heir:60",
            "--beneficiary",
            "0x02:Other:40",
            "--tag",
            "vampires",
        ])
        assert args.deceased is True
        assert args.death_year == 1912
        assert args.beneficiary == [("0x01", "Heir", 60.0), ("0x02", "Other", 40.0)]
        assert args.license == "open"
        assert args.royalty == 15

    def test_rejects_malformed_beneficiary(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["register", "a.txt", "--creator", "X", "--beneficiary", "0x01"])

    def test_requires_command(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCheckContracts:
    def test_healthy_example_chain(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHAIN_PROVIDER", "example")
        assert main(["check-contracts"]) == 0

    def test_wrong_network(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHAIN_PROVIDER", "example")
        monkeypatch.setenv("CHAIN_ID", "1516")
        assert main(["check-contracts"]) == 1

    def test_missing_contract(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHAIN_PROVIDER", "example")
        monkeypatch.setenv("IP_REGISTRY_ADDRESS", "0x0000000000000000000000000000000000000000")
        assert main(["check-contracts"]) == 1


class TestServe:
    def test_refuses_to_start_without_secrets(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("PINATA_API_KEY", "PINATA_SECRET_KEY", "GROQ_API_KEY"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("STORAGE_PROVIDER", "pinata")
        monkeypatch.setenv("ANALYSIS_PROVIDER", "groq")
        assert main(["serve"]) == 2


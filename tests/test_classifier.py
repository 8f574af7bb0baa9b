"""
End-to-end tests for ContentClassifier and the command-line entry point
"""
import json
from unittest.mock import Mock, patch

import pytest

from content_intelligence import ContentClassifier, DEFAULT_WEIGHTS
from content_intelligence.__main__ import main
from content_intelligence.agents import AgentType
from content_intelligence.claims import ClaimType, ReviewConfig
from content_intelligence.negotiation import NegotiationConfig
from content_intelligence.profiler import ProfilerConfig
from content_intelligence.signals import SignalCaptureService, SignalStore

from .conftest import events_sheet, goals_sheet, mixed_sheet, roster_sheet, rules_sheet
from .test_weight_evolution import overridden_plan_calls


@pytest.fixture
def signal_service():
    return Mock(spec=SignalCaptureService)


@pytest.fixture
def classifier(signal_service):
    return ContentClassifier(
        profiler_config=ProfilerConfig(),
        review_config=ReviewConfig(),
        negotiation_config=NegotiationConfig(),
        signal_service=signal_service,
    )


def _classify(classifier, sheet, name="Sheet1", index=0, **kwargs):
    headers, rows = sheet
    return classifier.classify(name, index, "upload.xlsx", headers, rows, **kwargs)


class TestClassify:

    def test_clear_single_layout(self, classifier):
        outcome = _classify(classifier, goals_sheet(), "Goals", 1)

        assert outcome.agent == AgentType.TARGET
        assert outcome.requires_review is False
        assert outcome.negotiation is None
        assert outcome.notes == []
        assert outcome.weights_version == DEFAULT_WEIGHTS.version
        assert outcome.profile.content_unit_id == "upload.xlsx::Goals::1"
        assert [c.claim_type for c in outcome.claims] == [ClaimType.FULL]

    def test_mixed_layout_is_split(self, classifier):
        outcome = _classify(classifier, mixed_sheet(), "Mixed")

        assert outcome.negotiation is not None
        assert outcome.negotiation.split is True
        assert outcome.requires_review is False
        assert "columns suggest more than one layout" in outcome.notes
        assert [(c.agent, c.claim_type) for c in outcome.claims] == [
            (AgentType.ENTITY, ClaimType.PARTIAL),
            (AgentType.TRANSACTION, ClaimType.PARTIAL),
        ]
        assert outcome.claim.claim_type == ClaimType.FULL

    def test_ambiguous_call_is_negotiated_and_flagged(self):
        strict = ContentClassifier(
            profiler_config=ProfilerConfig(),
            review_config=ReviewConfig(gap_threshold=0.5, confidence_threshold=0.95),
            negotiation_config=NegotiationConfig(),
        )
        outcome = _classify(strict, goals_sheet())

        assert outcome.negotiation is not None
        assert outcome.negotiation.split is False
        assert outcome.requires_review is True
        assert outcome.notes[0].startswith("phase 1 ambiguous")
        assert outcome.claims[0].agent == AgentType.TARGET

    def test_plan_rules_keep_one_claim(self, classifier):
        outcome = _classify(classifier, rules_sheet(), "Rules")

        assert outcome.agent == AgentType.PLAN
        assert outcome.requires_review is False
        assert [(c.agent, c.claim_type) for c in outcome.claims] == [(AgentType.PLAN, ClaimType.FULL)]
        assert outcome.negotiation.split is False
        assert outcome.negotiation.log[-1].stage == "clear_winner"

    def test_event_log_keeps_one_claim(self, classifier):
        outcome = _classify(classifier, events_sheet(), "Events")

        assert outcome.agent == AgentType.TRANSACTION
        assert outcome.requires_review is False
        assert outcome.negotiation is None
        assert [(c.agent, c.claim_type) for c in outcome.claims] == [(AgentType.TRANSACTION, ClaimType.FULL)]

    def test_empty_trailing_columns_stay_decisive(self, classifier):
        headers, rows = events_sheet()
        outcome = _classify(classifier, (headers + ["Notes", "Comment"], rows), "Events")

        assert outcome.agent == AgentType.TRANSACTION
        assert outcome.requires_review is False
        assert outcome.notes == []

    def test_unsplit_mixing_keeps_phase1_verdict(self, classifier):
        """Sparse extra columns trigger negotiation; target 0.85 over entity 0.70 needs no review"""
        headers, rows = goals_sheet()
        rows[0].update({"Extra A": 7, "Extra B": 3})
        rows[1].update({"Extra A": 3, "Extra B": 7})
        outcome = _classify(classifier, (headers + ["Extra A", "Extra B"], rows), "Goals")

        assert outcome.notes == ["columns suggest more than one layout"]
        assert outcome.negotiation.split is False
        assert outcome.negotiation.requires_review is True
        assert outcome.requires_review is False
        assert [(c.agent, c.claim_type) for c in outcome.claims] == [(AgentType.TARGET, ClaimType.FULL)]

    def test_per_call_weights(self, classifier):
        table = DEFAULT_WEIGHTS.with_adjustments("2.0.0", {AgentType.TRANSACTION: {'no_date': 0.9}})
        outcome = _classify(classifier, goals_sheet(), weights=table)

        assert outcome.agent == AgentType.TRANSACTION
        assert outcome.weights_version == "2.0.0"
        assert classifier.scorer.weights is DEFAULT_WEIGHTS

    def test_to_dict_is_json_ready(self, classifier):
        result = _classify(classifier, mixed_sheet(), "Mixed").to_dict()
        decoded = json.loads(json.dumps(result))

        assert decoded["agent"] == "entity"
        assert decoded["split"] is True
        assert decoded["negotiated"] is True
        assert decoded["claims"][1]["agent"] == "transaction"
        assert decoded["claims"][1]["field_range"] == [3, 4]
        assert decoded["scores"][0]["agent"] == "entity"
        assert decoded["profile"]["structure"]["row_count"] == 20


class TestRecordDecision:

    def test_auto_resolution(self, classifier, signal_service):
        outcome = _classify(classifier, roster_sheet(), "Roster")
        signal = classifier.record_decision(outcome, "tenant-a")

        assert signal.system_agent == AgentType.ENTITY
        assert signal.human_agent is None
        assert signal.overridden is False
        assert signal.content_unit_id == outcome.profile.content_unit_id
        signal_service.capture.assert_called_once_with(signal)

    def test_human_override(self, classifier, signal_service):
        outcome = _classify(classifier, roster_sheet(), "Roster")
        signal = classifier.record_decision(outcome, "tenant-a", human_agent=AgentType.TARGET)

        assert signal.overridden is True
        assert signal.final_agent == AgentType.TARGET

    def test_capture_failure_does_not_reach_caller(self):
        store = Mock(spec=SignalStore)
        store.append.side_effect = RuntimeError("disk full")
        failing = ContentClassifier(signal_service=SignalCaptureService(store))

        outcome = _classify(failing, roster_sheet(), "Roster")
        signal = failing.record_decision(outcome, "tenant-a")

        assert signal.system_agent == AgentType.ENTITY
        store.append.assert_called_once()

    def test_signal_service_created_lazily(self):
        with patch("content_intelligence.classifier.SignalCaptureService") as service_class:
            classifier = ContentClassifier()
            service_class.assert_not_called()
            assert classifier.signal_service is service_class.return_value


class TestCommandLine:

    @staticmethod
    def _document(sheet, name):
        headers, rows = sheet
        return {"sheetName": name, "headers": headers, "rows": rows}

    def test_classify_one_document(self, tmp_path, capsys):
        path = tmp_path / "goals.json"
        path.write_text(json.dumps(self._document(goals_sheet(), "Goals")), encoding="utf-8")

        assert main(["classify", str(path)]) == 0
        output = json.loads(capsys.readouterr().out)

        assert output["agent"] == "target"
        assert output["content_unit_id"] == "goals.json::Goals::0"
        assert "profile" not in output

    def test_classify_many_with_profile(self, tmp_path, capsys):
        path = tmp_path / "book.json"
        documents = [self._document(goals_sheet(), "Goals"), self._document(roster_sheet(), "Roster")]
        path.write_text(json.dumps(documents), encoding="utf-8")

        assert main(["classify", "--with-profile", str(path)]) == 0
        output = json.loads(capsys.readouterr().out)

        assert [o["agent"] for o in output] == ["target", "entity"]
        assert output[1]["content_unit_id"] == "book.json::Roster::1"
        assert output[0]["profile"]["structure"]["column_count"] == 4

    def test_missing_file(self, tmp_path):
        assert main(["classify", str(tmp_path / "absent.json")]) == 1

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        assert main(["classify", str(path)]) == 1

    def test_evolve(self, tmp_path, capsys):
        url = f"sqlite:///{tmp_path / 'signals.db'}"
        store = SignalStore(url)
        store.append(overridden_plan_calls(6))
        store.close()

        assert main(["evolve", "--store-url", url, "--tenant", "tenant-a", "--since", "2024-03-01"]) == 0
        report = json.loads(capsys.readouterr().out)

        assert report["proposal"]["has_enough_data"] is True
        assert report["proposal"]["signals_analyzed"] == 6
        assert report["proposal"]["proposed_table"]["weights"]["plan"]["high_sparsity"] == pytest.approx(0.15)
        assert report["accuracy"]["override_rate"] == 1.0
        assert report["trend"] is None

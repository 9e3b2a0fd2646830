from collections import OrderedDict

import pytest
from ape.utils import ZERO_ADDRESS

from deployment.confirm import _confirm_resolution


def _answers(monkeypatch, *answers):
    questions = list()
    replies = iter(answers)

    def fake_input(question):
        questions.append(question)
        return next(replies)

    monkeypatch.setattr("builtins.input", fake_input)
    return questions


def test_confirm_resolution(monkeypatch, capsys):
    questions = _answers(monkeypatch, "y")
    params = OrderedDict(name="Artspark", signer="0x1753a6d1617cec011a1032f3ea6172e92679d9bd")

    _confirm_resolution(params, "Artspark", kind="Initializer")

    assert questions == ["Deploy Artspark Y/N? "]
    output = capsys.readouterr().out
    assert "Initializer for Artspark" in output
    assert "\tname=Artspark" in output


def test_confirm_resolution_without_params(monkeypatch, capsys):
    questions = _answers(monkeypatch, "y")
    _confirm_resolution(OrderedDict(), "Artspark")
    assert questions == ["Deploy Artspark Y/N? "]
    assert "No constructor parameters for Artspark" in capsys.readouterr().out


def test_zero_address_asks_again(monkeypatch):
    questions = _answers(monkeypatch, "y", "y")
    _confirm_resolution(OrderedDict(signer=ZERO_ADDRESS), "Artspark")
    assert len(questions) == 2
    assert questions[1].startswith("Zero Address detected")


def test_zero_address_declined_aborts(monkeypatch, capsys):
    questions = _answers(monkeypatch, "y", "n")
    with pytest.raises(SystemExit):
        _confirm_resolution(OrderedDict(name="Artspark", signer=ZERO_ADDRESS), "Artspark")
    assert len(questions) == 2
    assert "Aborting deployment!" in capsys.readouterr().out


def test_declined_deployment_aborts(monkeypatch):
    questions = _answers(monkeypatch, "n")
    with pytest.raises(SystemExit):
        _confirm_resolution(OrderedDict(signer=ZERO_ADDRESS), "Artspark")
    assert questions == ["Deploy Artspark Y/N? "]

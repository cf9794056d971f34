"""Tests for WorkflowOrchestrator / run_agent_workflow: full runs end to end."""

import asyncio

import pytest

from flowagent.engine.dispatcher import OperationDispatcher, OperationRegistry
from flowagent.engine.orchestrator import WorkflowOrchestrator, run_agent_workflow
from flowagent.types import (
    Agent, DispatchOutcome, LogSeverity, RunState, StepResult,
)


# ── Trigger handling ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_no_trigger_fails_without_running_branches(orchestrator, log_collector, mock_generator, step):
    branches = [[step("ai", "ai", "generateText", prompt="x")]]
    result = await orchestrator.run(None, branches, log_collector)

    assert result.success is False
    assert result.branch_results == []
    assert mock_generator.calls == []
    failures = log_collector.by_severity(LogSeverity.FAILURE)
    assert [f.text for f in failures] == ["FAILURE: No trigger defined for this agent."]
    assert log_collector.texts[0] == "Starting run..."
    assert "Run finished." not in log_collector.texts


@pytest.mark.asyncio
async def test_trigger_seeded_from_default_payload(orchestrator, log_collector, gmail_trigger):
    result = await orchestrator.run(gmail_trigger, [], log_collector)

    assert result.success is True
    assert result.state == RunState.COMPLETED
    seeded = result.outputs["trigger-1"]
    assert set(seeded) == {"from", "subject", "body"}
    assert log_collector.texts == [
        "Starting run...",
        'Executing trigger: "On new email received"',
        log_collector.texts[2],
        "Run finished.",
    ]
    assert log_collector.texts[2].startswith("SUCCESS: Trigger fired successfully. Output:\n")
    assert log_collector.entries[2].severity == LogSeverity.SUCCESS


@pytest.mark.asyncio
async def test_webhook_default_payload(orchestrator, webhook_trigger):
    result = await orchestrator.run(webhook_trigger, [])
    payload = result.outputs["hook-1"]
    assert payload["data"] == {"message": "This is a test webhook payload"}
    assert "receivedAt" in payload


@pytest.mark.asyncio
async def test_supplied_trigger_input_overrides_default(orchestrator, gmail_trigger, step):
    calls = []

    async def record(dispatcher, s, params, outputs, system_prompt):
        calls.append(params["text"])
        return StepResult(outcome=DispatchOutcome.SUCCESS, log_text="ok")

    orchestrator.dispatcher.registry.register("slack", "sendMessage", record)
    trigger_input = {"trigger-1": {"from": "boss@example.com", "subject": "Urgent", "body": "call me"}}
    branches = [[step("n", "slack", "sendMessage", text="{{outputs.trigger-1.from}}: {{outputs.trigger-1.body}}")]]

    result = await orchestrator.run(gmail_trigger, branches, trigger_input=trigger_input)

    assert result.success is True
    assert result.outputs["trigger-1"] == trigger_input["trigger-1"]
    assert calls == ["boss@example.com: call me"]


@pytest.mark.asyncio
async def test_trigger_input_for_other_step_ignored(orchestrator, gmail_trigger):
    result = await orchestrator.run(gmail_trigger, [], trigger_input={"other": {"x": 1}})
    assert "body" in result.outputs["trigger-1"]


@pytest.mark.asyncio
async def test_null_trigger_input_falls_back_to_default(orchestrator, gmail_trigger):
    result = await orchestrator.run(gmail_trigger, [], trigger_input={"trigger-1": None})
    assert result.success is True
    assert "body" in result.outputs["trigger-1"]


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_input", ["just a string", ["a", "b"], 42])
async def test_non_object_trigger_input_ignored(orchestrator, gmail_trigger, bad_input):
    result = await orchestrator.run(gmail_trigger, [], trigger_input={"trigger-1": bad_input})
    assert result.success is True
    assert "body" in result.outputs["trigger-1"]


@pytest.mark.asyncio
async def test_empty_trigger_input_object_is_used(orchestrator, gmail_trigger):
    result = await orchestrator.run(gmail_trigger, [], trigger_input={"trigger-1": {}})
    assert result.outputs["trigger-1"] == {}


@pytest.mark.asyncio
async def test_same_step_id_in_two_branches_succeeds(make_generator, gmail_trigger, step):
    orchestrator = WorkflowOrchestrator(text_generator=make_generator(response="x"))
    branches = [
        [step("dup", "ai", "generateText", prompt="a")],
        [step("dup", "ai", "generateText", prompt="b")],
    ]
    result = await orchestrator.run(gmail_trigger, branches)
    assert result.success is True
    assert result.branch_results == [True, True]
    assert result.outputs["dup"] == {"response": "x", "output": "x"}


@pytest.mark.asyncio
async def test_action_reusing_trigger_id_overwrites_trigger_outputs(make_generator, gmail_trigger, step):
    orchestrator = WorkflowOrchestrator(text_generator=make_generator(response="x"))
    result = await orchestrator.run(gmail_trigger, [[step("trigger-1", "ai", "generateText")]])
    assert result.success is True
    assert result.outputs["trigger-1"] == {"response": "x", "output": "x"}


# ── Branch aggregation ───────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_failing_branch_does_not_stop_siblings(orchestrator, log_collector, gmail_trigger, step):
    branches = [
        [step("bad", "control", "filter", input=5, condition="between", value=3)],
        [step("ok-1", "slack", "sendMessage", channel="#a"), step("ok-2", "gmail", "sendEmail", to="x")],
    ]
    result = await orchestrator.run(gmail_trigger, branches, log_collector)

    assert result.success is False
    assert result.branch_results == [False, True]
    assert "[Branch 2] SUCCESS: Email sent to x." in log_collector.texts
    assert log_collector.texts[-1] == "Run finished."


@pytest.mark.asyncio
async def test_short_circuit_branch_counts_as_success(orchestrator, gmail_trigger, step):
    branches = [[step("f", "control", "filter", input="abc", condition="equals", value="xyz")]]
    result = await orchestrator.run(gmail_trigger, branches)
    assert result.success is True
    assert result.branch_results == [True]


@pytest.mark.asyncio
async def test_system_prompt_forwarded_to_every_generation(orchestrator, mock_generator, gmail_trigger, step):
    branches = [
        [step("g1", "ai", "generateText", prompt="one")],
        [step("g2", "ai", "generateText", prompt="two")],
    ]
    await orchestrator.run(gmail_trigger, branches, system_prompt="You are helpful.")
    assert sorted(mock_generator.calls) == [("one", "You are helpful."), ("two", "You are helpful.")]


@pytest.mark.asyncio
async def test_branches_run_concurrently(mock_generator, gmail_trigger, step):
    """Both branches must be in flight at once: each waits for the other's signal."""
    first_started = asyncio.Event()
    second_started = asyncio.Event()

    async def first(dispatcher, s, params, outputs, system_prompt):
        first_started.set()
        await asyncio.wait_for(second_started.wait(), timeout=1)
        return StepResult(outcome=DispatchOutcome.SUCCESS)

    async def second(dispatcher, s, params, outputs, system_prompt):
        second_started.set()
        await asyncio.wait_for(first_started.wait(), timeout=1)
        return StepResult(outcome=DispatchOutcome.SUCCESS)

    registry = OperationRegistry()
    registry.register("test", "first", first)
    registry.register("test", "second", second)
    orchestrator = WorkflowOrchestrator(text_generator=mock_generator, registry=registry)

    result = await orchestrator.run(
        gmail_trigger, [[step("a", "test", "first")], [step("b", "test", "second")]]
    )
    assert result.success is True


@pytest.mark.asyncio
async def test_concurrent_matches_sequential(make_generator, gmail_trigger, step):
    """Independent branches produce the same outputs whether run together or one at a time."""
    generator = make_generator(response=lambda prompt: prompt.upper())

    def branch(prefix: str):
        return [
            step(f"{prefix}-gen", "ai", "generateText", prompt=f"{prefix} {{{{outputs.trigger-1.subject}}}}"),
            step(f"{prefix}-echo", "ai", "generateText", prompt="{{outputs." + prefix + "-gen.response}}!"),
        ]

    orchestrator = WorkflowOrchestrator(text_generator=generator)
    together = await orchestrator.run(gmail_trigger, [branch("b1"), branch("b2")])
    b1_alone = await orchestrator.run(gmail_trigger, [branch("b1")])
    b2_alone = await orchestrator.run(gmail_trigger, [branch("b2")])

    for key in ("b1-gen", "b1-echo"):
        assert together.outputs[key] == b1_alone.outputs[key]
    for key in ("b2-gen", "b2-echo"):
        assert together.outputs[key] == b2_alone.outputs[key]
    assert together.outputs["b1-echo"]["response"] == "B1 IMPORTANT: SALES ENQUIRY!"


@pytest.mark.asyncio
async def test_each_run_has_its_own_outputs(make_generator, gmail_trigger, step):
    orchestrator = WorkflowOrchestrator(text_generator=make_generator(response="x"))
    branches = [[step("g", "ai", "generateText")]]
    r1, r2 = await asyncio.gather(
        orchestrator.run(gmail_trigger, branches),
        orchestrator.run(gmail_trigger, branches),
    )
    assert r1.success and r2.success
    assert r1.outputs["g"] == r2.outputs["g"] == {"response": "x", "output": "x"}


@pytest.mark.asyncio
async def test_async_log_sink_supported(orchestrator, gmail_trigger):
    seen = []

    async def sink(entry):
        await asyncio.sleep(0)
        seen.append(entry.text)

    await orchestrator.run(gmail_trigger, [], sink)
    assert seen[0] == "Starting run..."
    assert seen[-1] == "Run finished."


@pytest.mark.asyncio
async def test_broken_log_sink_does_not_fail_run(orchestrator, gmail_trigger, step):
    def sink(entry):
        raise RuntimeError("display went away")

    result = await orchestrator.run(gmail_trigger, [[step("s", "slack", "sendMessage")]], sink)
    assert result.success is True


@pytest.mark.asyncio
async def test_run_agent_uses_agent_system_prompt(orchestrator, mock_generator, gmail_trigger, step):
    agent = Agent(
        id="a1", name="Writer", trigger=gmail_trigger,
        actions=[[step("g", "ai", "generateText", prompt="hi")]],
        system_prompt="Speak like a pirate.",
    )
    result = await orchestrator.run_agent(agent)
    assert result.success is True
    assert mock_generator.calls == [("hi", "Speak like a pirate.")]


# ── End-to-end scenarios ─────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_email_triage_tech_short_circuits_before_call_agent(
    mock_generator, agent_store, log_collector, gmail_trigger, step
):
    calls = []
    registry = OperationRegistry()
    original_call_agent = registry.get("agent", "callAgent")

    async def spy_call_agent(dispatcher, s, params, outputs, system_prompt):
        calls.append(params["agentId"])
        return await original_call_agent(dispatcher, s, params, outputs, system_prompt)

    registry.register("agent", "callAgent", spy_call_agent)
    orchestrator = WorkflowOrchestrator(text_generator=mock_generator, agent_store=agent_store, registry=registry)

    branch = [
        step("classify", "ai", "analyzeText", input="sales or tech? {{outputs.trigger-1.body}}"),
        step("only-sales", "control", "filter",
             input="{{outputs.classify.response}}", condition="contains", value="sales"),
        step("hand-off", "agent", "callAgent", agentId="agent-sales"),
    ]
    result = await orchestrator.run(gmail_trigger, [branch], log_collector)

    assert result.success is True
    assert calls == []
    assert "hand-off" not in result.outputs
    assert any("Filter condition NOT met" in t for t in log_collector.texts)
    assert mock_generator.calls[0][0].startswith("sales or tech? Hello, I am interested")


@pytest.mark.asyncio
async def test_email_triage_sales_reaches_call_agent(make_generator, agent_store, log_collector, gmail_trigger, step):
    orchestrator = WorkflowOrchestrator(text_generator=make_generator(response="Sales"), agent_store=agent_store)
    branch = [
        step("classify", "ai", "analyzeText", input="{{outputs.trigger-1.body}}"),
        step("only-sales", "control", "filter",
             input="{{outputs.classify.response}}", condition="contains", value="sales"),
        step("hand-off", "agent", "callAgent", agentId="agent-sales"),
    ]
    result = await orchestrator.run(gmail_trigger, [branch], log_collector)

    assert result.success is True
    assert any("initiated a call to agent with ID: agent-sales" in t for t in log_collector.texts)


@pytest.mark.asyncio
async def test_single_unmodeled_step(orchestrator, log_collector, webhook_trigger, step):
    result = await orchestrator.run(
        webhook_trigger, [[step("x", "notion", "createPage", title="t")]], log_collector
    )
    assert result.success is True
    assert "[Branch 1] SUCCESS: Executed 'createPage'." in log_collector.texts


@pytest.mark.asyncio
async def test_unknown_condition_fails_run_but_siblings_evaluated(orchestrator, log_collector, gmail_trigger, step):
    branches = [
        [step("ok", "slack", "sendMessage", channel="#a")],
        [step("bad", "control", "filter", input=5, condition="between", value=1),
         step("never", "slack", "sendMessage", channel="#never")],
        [step("also-ok", "google_drive", "uploadFile", fileName="notes.txt")],
    ]
    result = await orchestrator.run(gmail_trigger, branches, log_collector)

    assert result.success is False
    assert result.branch_results == [True, False, True]
    assert "[Branch 2] FAILURE: Unknown filter condition: between" in log_collector.texts
    assert "[Branch 1] SUCCESS: Message posted to #a." in log_collector.texts
    assert "[Branch 3] SUCCESS: File 'notes.txt' uploaded to Google Drive." in log_collector.texts
    assert not any("#never" in t for t in log_collector.texts)


@pytest.mark.asyncio
async def test_generation_failure_fails_only_its_branch(make_generator, log_collector, gmail_trigger, step):
    orchestrator = WorkflowOrchestrator(text_generator=make_generator(error="LLM call failed: 503"))
    branches = [
        [step("g", "ai", "generateText", prompt="x"), step("after", "slack", "sendMessage")],
        [step("s", "slack", "sendMessage", channel="#b")],
    ]
    result = await orchestrator.run(gmail_trigger, branches, log_collector)

    assert result.success is False
    assert result.branch_results == [False, True]
    assert "[Branch 1] FAILURE: Error: LLM call failed: 503" in log_collector.texts


@pytest.mark.asyncio
async def test_run_agent_workflow_entry_point(mock_generator, log_collector, gmail_trigger, step):
    result = await run_agent_workflow(
        gmail_trigger,
        [[step("s", "slack", "sendMessage", channel="#c")]],
        log_collector,
        text_generator=mock_generator,
    )
    assert result.success is True
    assert log_collector.texts[0] == "Starting run..."
    assert log_collector.texts[-1] == "Run finished."


@pytest.mark.asyncio
async def test_run_agent_workflow_without_trigger(mock_generator, log_collector):
    result = await run_agent_workflow(None, [], log_collector, text_generator=mock_generator)
    assert result.success is False
    assert len(log_collector.by_severity(LogSeverity.FAILURE)) == 1


def test_default_orchestrator_uses_llm_generator(config):
    from flowagent.llm.client import LLMTextGenerator

    orchestrator = WorkflowOrchestrator(config=config)
    assert isinstance(orchestrator.dispatcher, OperationDispatcher)
    assert isinstance(orchestrator.dispatcher.text_generator, LLMTextGenerator)
    assert orchestrator.dispatcher.text_generator.client.model == "mock/test-model"

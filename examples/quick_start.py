"""Minimal agent-stream example with a dosage tool. Requires OPENAI_API_KEY."""

import json
import logging
from typing import Optional

from pydantic import Field

from agent_stream import (
    Agent,
    AgentConfig,
    Message,
    NullCallbacks,
    Tool,
    ToolInput,
    ToolRegistry,
)

# mg/kg/day, max mg/day, doses per day
DOSAGE_RULES = {
    "paracetamol": (60, 4000, 4),
    "ibuprofene": (30, 1200, 3),
    "amoxicilline": (80, 3000, 3),
}


class DosageInput(ToolInput):
    drug_name: str = Field(description="Drug name or INN, e.g. 'paracetamol'")
    weight_kg: float = Field(description="Patient weight in kilograms")
    age_years: Optional[float] = Field(default=None, description="Patient age in years")


class CalculateDosage(Tool):
    name = "calculate_dosage"
    description = "Computes a weight-based daily dosage. Indicative only."
    input_model = DosageInput

    async def execute(
        self, drug_name: str, weight_kg: float, age_years: Optional[float]
    ) -> str:
        rule = DOSAGE_RULES.get(drug_name.lower())
        if rule is None:
            return json.dumps(
                {
                    "success": False,
                    "message": f"No dosage rule for '{drug_name}'",
                    "available_drugs": list(DOSAGE_RULES),
                }
            )
        per_kg, max_daily, doses = rule
        daily = min(weight_kg * per_kg, max_daily)
        return json.dumps(
            {
                "success": True,
                "daily_dose_mg": round(daily),
                "dose_per_take_mg": round(daily / doses),
                "doses_per_day": doses,
                "capped": daily >= max_daily,
            }
        )


class PrintingCallbacks(NullCallbacks):
    def on_chunk(self, text):
        print(text, end="", flush=True)

    def on_tool_call(self, tool_call):
        print(f"\n[tool] {tool_call.name}({tool_call.arguments})")

    def on_tool_result(self, result, tool_name):
        print(f"[tool] {tool_name} -> {result.content}")


agent = Agent(
    AgentConfig(provider="openai", model="gpt-4o-mini", max_iterations=5),
    ToolRegistry([CalculateDosage()]),
)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    execution = agent.run(
        [Message(role="user", content="Paracetamol dosage for a 14 kg child?")],
        PrintingCallbacks(),
    )
    print()
    print(f"success={execution.success} iterations={execution.iteration_count}")

"""Manager agent, capabilities and the pydantic_ai bridge."""

"""Registry mapping agent ids to executors and their cards."""

from a2a_sandbox.agents.base import AgentExecutor
from a2a_sandbox.agents.debate.agent import DebateAgent
from a2a_sandbox.agents.roster import DEBATE_AGENTS, SCHEDULING_AGENTS
from a2a_sandbox.agents.scheduling import SchedulingAgent
from a2a_sandbox.agents.skills import ScheduleSkills
from a2a_sandbox.errors import AgentNotFoundError
from a2a_sandbox.llm import LanguageModel
from a2a_sandbox.logging import get_logger
from a2a_sandbox.protocols.a2a.models import AgentCard

logger = get_logger(__name__)


class AgentRegistry:
    """Executors keyed by agent id.

    Cards are derived from the executor on every lookup, so configuration
    changes show up immediately.
    """

    def __init__(self) -> None:
        self._agents: dict[str, AgentExecutor] = {}

    def register(self, agent: AgentExecutor) -> None:
        """Add an executor; an existing entry with the same id is replaced."""
        replaced = agent.id in self._agents
        self._agents[agent.id] = agent
        logger.debug("Agent registered", agent_id=agent.id, replaced=replaced)

    def unregister(self, agent_id: str) -> bool:
        return self._agents.pop(agent_id, None) is not None

    def get(self, agent_id: str) -> AgentExecutor | None:
        return self._agents.get(agent_id)

    def require(self, agent_id: str) -> AgentExecutor:
        """Like :meth:`get` but raises for unknown ids.

        Raises:
            AgentNotFoundError: If no agent is registered under ``agent_id``
        """
        agent = self._agents.get(agent_id)
        if agent is None:
            raise AgentNotFoundError(agent_id)
        return agent

    def has(self, agent_id: str) -> bool:
        return agent_id in self._agents

    def get_all(self) -> list[AgentExecutor]:
        return list(self._agents.values())

    def get_ids(self) -> list[str]:
        return list(self._agents)

    def get_agent_card(self, agent_id: str) -> AgentCard | None:
        agent = self._agents.get(agent_id)
        return agent.get_agent_card() if agent else None

    def get_agent_cards(self) -> list[AgentCard]:
        return [agent.get_agent_card() for agent in self._agents.values()]

    def __len__(self) -> int:
        return len(self._agents)

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents


def build_default_registry(
    skills: ScheduleSkills,
    llm: LanguageModel | None = None,
    base_url: str | None = None,
) -> AgentRegistry:
    """Registry pre-populated with the built-in scheduling and debate agents.

    Args:
        skills: Calendar skills shared by the scheduling agents
        llm: Optional language model handed to every agent
        base_url: Public base URL for agent cards
    """
    registry = AgentRegistry()
    for config in SCHEDULING_AGENTS:
        registry.register(
            SchedulingAgent(config.model_copy(deep=True), skills, llm=llm, base_url=base_url)
        )
    for config, stance in DEBATE_AGENTS:
        registry.register(
            DebateAgent(config.model_copy(deep=True), stance, llm=llm, base_url=base_url)
        )

    logger.info("Agent registry initialized", agents=registry.get_ids())
    return registry

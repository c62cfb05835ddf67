"""Default prompts used by :class:`~agent_workflows.core.workflows.WorkflowEngine`.

The runners never embed prompt text; these are ordinary arguments that
callers can replace. Structured-output prompts do not spell out the JSON
shape themselves: the completion port appends the schema.
"""

from __future__ import annotations

from agent_workflows.engine.chain import ChainStep
from agent_workflows.engine.prompt import PromptTemplate

# Marker the requirements analyst replies with when a request is infeasible.
FAIL_MARKER = "FAIL"

REQUIREMENT_ANALYSIS = PromptTemplate(
    """You are a senior requirements analyst. Analyse the following business requirement:

Requirement: {input}

Cover:
1. Core business goals
2. Main functional modules
3. Technical challenges
4. Risk assessment

If the requirement cannot be implemented, reply with just "FAIL".
"""
)

ARCHITECTURE_DESIGN = PromptTemplate(
    """You are a system architect. Based on the requirement analysis below, design the system:

Requirement analysis: {input}

Provide:
1. Overall system architecture
2. Technology stack
3. Key points of the database design
4. Interface design conventions
5. Deployment architecture

Give a complete architecture proposal.
"""
)

IMPLEMENTATION_PLAN = PromptTemplate(
    """You are a project manager. Based on the architecture below, write an implementation plan:

Architecture: {input}

Provide:
1. Development phases
2. Staffing
3. Milestones and timeline
4. Quality assurance measures
5. Risk mitigation

Give a detailed implementation plan.
"""
)

DELIVERY_CHECKLIST = PromptTemplate(
    """You are a delivery manager. Based on the implementation plan below, write a delivery checklist:

Implementation plan: {input}

Provide:
1. Definition of done for development
2. Test acceptance criteria
3. Go-live checklist
4. Operations and monitoring requirements
5. User training plan

Present the checklist as a clear table.
"""
)

PROJECT_CHAIN: tuple[ChainStep, ...] = (
    ChainStep(REQUIREMENT_ANALYSIS, failure_marker=FAIL_MARKER, name="requirement analysis"),
    ChainStep(ARCHITECTURE_DESIGN, name="architecture design"),
    ChainStep(IMPLEMENTATION_PLAN, name="implementation plan"),
    ChainStep(DELIVERY_CHECKLIST, name="delivery checklist"),
)

RISK_ASSESSMENT = PromptTemplate(
    """You are a risk assessment expert. Analyse the main risks the following department faces
during its digital transformation.

Cover:
1. Technical risks
2. People risks
3. Business continuity risks
4. Budget risks
5. Recommendations

Input: {input}
"""
)

AGGREGATOR = PromptTemplate(
    """You are a data aggregation expert. Merge the analyses below into one consolidated report.

Original analysis task: {task}

Results per department or region:
{results}

Provide:
1. Summary of the combined analysis
2. Common trends and patterns
3. Key differences
4. Overall conclusions and recommendations

Produce a single consolidated report.
"""
)

ORCHESTRATOR = PromptTemplate(
    """You are a project management expert. Break the complex task below into subtasks that
need different specialist skills and can be executed in parallel.

Task: {task}

Analyse the complexity and the specialist areas involved, then split the task into 2-4
subtasks. Each subtask must:
1. Belong to a clear specialist area (frontend, backend API, database design, testing, ...)
2. Be executable independently
3. Have a concrete deliverable

Put your complexity analysis and decomposition strategy in "analysis" and the subtasks,
each with a "type" naming the specialist area and a "description", in "tasks".
"""
)

WORKER = PromptTemplate(
    """You are a senior expert in {task_type}. Complete the following specialist task:

Project background: {original_task}
Specialist area: {task_type}
Task: {task_description}

Follow industry best practice and cover:
1. Technology choices and architectural considerations
2. Concrete implementation plan
3. Potential risks and how to address them
4. Quality assurance measures

Give a professional, detailed solution.
"""
)

GENERATOR = PromptTemplate(
    """You are a code generation assistant. Write high quality code for the task below.

Guidelines:
- On the first attempt, produce a basic but complete implementation
- When feedback is given, address every point one by one
- Every iteration must clearly improve on the previous version
- Improve step by step instead of implementing everything at once

Put your reasoning for this round in "thoughts" and the improved code in "response".

{context}
Task: {task}
"""
)

EVALUATOR = PromptTemplate(
    """You are a very strict interviewer. Evaluate the code below rigorously:
1. Efficiency: analyse every type used, down to the lowest level, for best performance
2. Avoid repeated resizing of collections

Rules:
- Return PASS only when the code is excellent on every dimension
- If any dimension can be improved, return NEEDS_IMPROVEMENT
- Return FAIL if the code does not address the task at all
- Give specific, detailed suggestions in "feedback"

Task: {task}

Code:
{response}

Better too strict than too lenient.
"""
)

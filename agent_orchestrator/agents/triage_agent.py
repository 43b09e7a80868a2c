from typing import Any, Dict, Tuple

from ..config import CODING, Config
from ..core.tools import AgentTool
from ..core.types import AgentDescriptor

DOC_TYPES = ["api", "tutorial", "guide", "readme", "technical", "user"]
DOC_FORMATS = ["markdown", "rst", "html", "plain"]
DETAIL_LEVELS = ["brief", "detailed", "comprehensive"]
CODE_STYLES = ["function", "class", "module", "script", "snippet"]


# ---- Documentation ----

def create_documentation_tool(config: Config) -> AgentTool:
    def build(
        topic: str,
        type: str,
        format: str = "markdown",
        detail_level: str = "detailed"
    ) -> Tuple[AgentDescriptor, str]:
        extra = []
        if format == "markdown":
            extra.append("- Use proper markdown syntax with headers, code blocks, lists, and links")
        if type == "api":
            extra.append("- Include request/response examples, parameters, and error codes")
        elif type == "tutorial":
            extra.append("- Provide step-by-step instructions with clear examples")
        elif type == "guide":
            extra.append("- Structure content logically with clear sections and subsections")

        instructions = "\n".join([
            f"You are an expert technical writer specializing in creating {detail_level} {type} documentation.",
            f"Your task is to generate well-structured, clear, and comprehensive documentation in {format} format.",
            "",
            "Guidelines:",
            "- Use appropriate headings and structure",
            "- Include examples where relevant",
            f"- Write for the target audience of {type} documentation",
            "- Ensure accuracy and clarity",
            f"- Follow {format} formatting conventions",
            *extra,
            "",
            "Always provide comprehensive documentation that covers all relevant aspects of the requested topic.",
        ])
        writer = AgentDescriptor(
            name="Documentation-Writer",
            instructions=instructions,
            model=config.model_settings(),
            execution_hints={"max_turns": config.max_turns},
        )
        task = (
            f"Create {detail_level} {type} documentation for: {topic}\n\n"
            "Please generate comprehensive documentation that covers all relevant aspects of this topic."
        )
        return writer, task

    def format_output(text: str, args: Dict[str, Any]) -> str:
        return (
            f"Generated {args.get('type')} documentation for \"{args.get('topic')}\" "
            f"({args.get('detail_level', 'detailed')} level, {args.get('format', 'markdown')} format):\n\n{text}"
        )

    return AgentTool(
        name="write_documentation",
        description="Generate high-quality documentation by delegating to a documentation writer agent",
        build=build,
        format_output=format_output,
        parameters={
            "type": "object",
            "properties": {
                "topic": {"type": "string", "description": "The topic or subject to document"},
                "type": {"type": "string", "enum": DOC_TYPES, "description": "Type of documentation to generate"},
                "format": {"type": "string", "enum": DOC_FORMATS, "description": "Output format (default: markdown)"},
                "detail_level": {"type": "string", "enum": DETAIL_LEVELS, "description": "Level of detail (default: detailed)"},
            },
            "required": ["topic", "type"],
        },
    )


def create_documentation_agent(config: Config) -> AgentDescriptor:
    return AgentDescriptor(
        name="Documentation-Agent",
        model=config.model_settings(),
        instructions="""You are an expert technical documentation agent. You can create various types of documentation including:
- API documentation with examples and parameter details
- Tutorial documentation with step-by-step instructions
- Technical guides with clear structure and examples
- README files for projects
- User manuals and guides

You have access to a documentation writing tool that can generate high-quality documentation in various formats.
When users request documentation, use the write_documentation tool to create comprehensive, well-structured content.""",
        tools=(create_documentation_tool(config),),
        handoff_description="A documentation specialist that can create high-quality technical documentation, API docs, tutorials, guides, and README files.",
        execution_hints={"max_turns": config.max_turns},
    )


# ---- Coding ----

def create_coding_tool(config: Config) -> AgentTool:
    def build(
        task: str,
        language: str,
        style: str,
        framework: str = "",
        include_tests: bool = False,
        include_comments: bool = True
    ) -> Tuple[AgentDescriptor, str]:
        framework = (framework or "").strip()
        requirements = [
            f"- Write {style} style code",
            f"- Use {language} syntax and conventions",
        ]
        if framework:
            requirements.append(f"- Use {framework} framework/library")
        requirements.append(
            "- Include clear, helpful comments explaining the code" if include_comments
            else "- Minimize comments, focus on clean code"
        )
        requirements.append(
            "- Include comprehensive unit tests" if include_tests else "- Do not include tests"
        )
        requirements.extend([
            "- Follow proper naming conventions",
            "- Handle errors appropriately",
            "- Write production-ready code",
        ])

        coder = AgentDescriptor(
            name="Code-Writer",
            instructions="\n".join([
                f"You are an expert software engineer specializing in {language} development.",
                "Generate clean, efficient, and well-structured code following best practices.",
                "",
                "Requirements:",
                *requirements,
                "",
                "Output format: Provide only the code with minimal explanation.",
            ]),
            model=config.model_settings(CODING),
            execution_hints={"max_turns": config.max_turns},
        )

        prompt = [f"Task: {task}", "", f"Generate {language} code that accomplishes this task."]
        if include_tests:
            prompt.append("Include unit tests for the generated code.")
        if framework:
            prompt.append(f"Use {framework} framework.")
        return coder, "\n".join(prompt)

    def format_output(text: str, args: Dict[str, Any]) -> str:
        return f"Generated {args.get('language')} code ({args.get('style')} style) for \"{args.get('task')}\":\n\n{text}"

    return AgentTool(
        name="write_code",
        description="Generate high-quality code by delegating to a code writer agent",
        build=build,
        format_output=format_output,
        parameters={
            "type": "object",
            "properties": {
                "task": {"type": "string", "description": "Description of the code to generate"},
                "language": {"type": "string", "description": "Programming language (e.g., typescript, python, javascript, java, etc.)"},
                "style": {"type": "string", "enum": CODE_STYLES, "description": "Code structure/style to generate"},
                "framework": {"type": "string", "description": "Framework or library to use (leave empty if none)"},
                "include_tests": {"type": "boolean", "description": "Whether to include unit tests (default: false)"},
                "include_comments": {"type": "boolean", "description": "Whether to include detailed comments (default: true)"},
            },
            "required": ["task", "language", "style"],
        },
    )


def create_coding_agent(config: Config) -> AgentDescriptor:
    return AgentDescriptor(
        name="Coding-Agent",
        model=config.model_settings(CODING),
        instructions="""You are an expert software development agent specializing in code generation and programming assistance.
You can help with:
- Writing functions, classes, modules, and scripts
- Supporting multiple programming languages (TypeScript, Python, JavaScript, Java, C#, etc.)
- Following best practices and coding conventions
- Generating unit tests when requested
- Using various frameworks and libraries

You have access to a code generation tool that can create high-quality, production-ready code.
When users request code, use the write_code tool to generate clean, efficient, and well-documented solutions.""",
        tools=(create_coding_tool(config),),
        handoff_description="A coding specialist that can generate high-quality code in multiple programming languages, create functions, classes, and modules with best practices.",
        execution_hints={"max_turns": config.max_turns},
    )


# ---- Triage ----

TRIAGE_PROMPT = """You are an intelligent triage agent that routes requests to the right specialist.

Analysis guidelines:
- If the user asks for explanations, guides, tutorials, documentation, README files, or help understanding concepts, handoff to the Documentation Agent
- If the user asks for code implementation, functions, classes, scripts, algorithms, or programming solutions, handoff to the Coding Agent
- If the request involves both, prioritize based on the primary intent
- If the request needs neither specialist, answer it yourself

Available handoffs:
- Documentation Agent: For creating technical documentation, API docs, tutorials, guides, and README files
- Coding Agent: For generating code, functions, classes, and programming assistance

Determine the user's primary need and handoff to the appropriate specialist agent."""


def create_triage_agent(config: Config) -> AgentDescriptor:
    return AgentDescriptor(
        name="Triage-Agent",
        model=config.model_settings(),
        instructions=TRIAGE_PROMPT,
        handoffs=(create_documentation_agent(config), create_coding_agent(config)),
        execution_hints={"max_turns": config.max_turns},
    )

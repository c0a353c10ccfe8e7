"""Interactive list selection on the terminal"""

from typing import Callable, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.prompt import Prompt

# (label shown to the user, value returned)
Choice = Tuple[str, str]
ChoicePrompt = Callable[[str, Sequence[Choice]], Optional[str]]


def make_choice_prompt(console: Optional[Console] = None) -> ChoicePrompt:
    """Build a prompt that lists numbered choices and returns the chosen value"""
    console = console or Console()

    def prompt(title: str, choices: Sequence[Choice]) -> Optional[str]:
        if not choices:
            return None

        console.print(f"\n[bold]{title}[/bold]")
        for index, (label, _) in enumerate(choices, start=1):
            console.print(f"  {index}. {label}")

        numbers: List[str] = [str(i) for i in range(1, len(choices) + 1)]
        selected = Prompt.ask("Enter number", choices=numbers, default="1", console=console)
        return choices[int(selected) - 1][1]

    return prompt

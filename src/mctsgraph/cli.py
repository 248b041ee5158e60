"""
Command-line interface for mctsgraph.

Commands:
- list-games: Show available games
- play: Play against the engine
- match: Pit the engine against a baseline (or itself)
- analyse: Search one position and show the statistics
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="mctsgraph",
    help="Monte Carlo Tree Search on a transposition graph",
    no_args_is_help=True,
)

console = Console()


def _load_config(config_path: Optional[Path]):
    from .utils import Config

    if not (config_path and config_path.exists()):
        return Config()
    try:
        return Config.load(str(config_path))
    except ValueError as e:
        console.print(f"[red]Error in {config_path}: {e}[/]")
        raise typer.Exit(1)


def _get_game_or_exit(game_name: str):
    from .games import get_game

    try:
        return get_game(game_name)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)


@app.command("list-games")
def list_games_cmd() -> None:
    """List all available games."""
    from .games import list_games, get_game

    table = Table(title="Available Games")
    table.add_column("Name", style="cyan")
    table.add_column("Opening moves", style="yellow")

    for name in list_games():
        state = get_game(name).initial_state()
        table.add_row(name, str(len(state.valid_actions())))

    console.print(table)


@app.command()
def play(
    game_name: str = typer.Argument(..., help="Game to play"),
    difficulty: str = typer.Option("medium", "--difficulty", "-d", help="easy/medium/hard/impossible"),
    human_first: bool = typer.Option(True, "--first/--second", help="Human plays first"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config YAML file"),
) -> None:
    """Play against the engine."""
    from .games import DRAW, other_player
    from .mcts import Mcts
    from .play import Difficulty, get_difficulty_config
    from .utils import Logger, print_board, set_seed

    game = _get_game_or_exit(game_name)
    config = _load_config(config_path)
    set_seed(config.seed)

    try:
        diff = Difficulty(difficulty.lower())
    except ValueError:
        console.print("[red]Invalid difficulty. Choose: easy, medium, hard, impossible[/]")
        raise typer.Exit(1)

    diff_config = get_difficulty_config(diff, game_name)
    console.print(f"[blue]Difficulty: {diff_config.name} ({diff_config.max_iterations} iterations)[/]")

    mcts_config = replace(
        config.mcts,
        max_iterations=diff_config.max_iterations,
        seed=config.seed if config.mcts.seed is None else config.mcts.seed,
    )
    logger = Logger(log_dir=config.log_dir, verbose=False)

    state = game.initial_state()
    agent = Mcts(state, mcts_config)
    first = state.side_to_move()
    human_player = first if human_first else other_player(first)

    console.print(f"\n[bold]Playing {game_name}[/]")
    console.print("You are X, AI is O\n" if human_first else "You are O, AI is X\n")

    last_mover = None
    while not state.is_terminal():
        print_board(state.render(), title=game_name)
        mover = state.side_to_move()
        if mover == human_player:
            legal = state.valid_actions()
            while True:
                action_str = typer.prompt(f"Your move {[game.format_action(a) for a in legal]}")
                try:
                    action = game.parse_action(action_str)
                except ValueError:
                    console.print("[red]Enter a valid move[/]")
                    continue
                if action in legal:
                    break
                console.print("[red]Invalid move[/]")
        else:
            console.print("[cyan]AI thinking...[/]")
            action = agent.best_action(diff_config.selection)
            logger.log_search(agent.report(diff_config.selection), move=len(agent.actions_done) + 1)
            console.print(f"AI played: {game.format_action(action)}\n")

        state.apply_action(action)
        agent.apply_root_action(action)
        last_mover = mover

    print_board(state.render(), title=game_name)
    value = state.evaluate_terminal()
    if value == DRAW:
        console.print("[yellow]Draw![/]")
    elif (last_mover == human_player) == (value > DRAW):
        console.print("[green]You win![/]")
    else:
        console.print("[red]AI wins![/]")


@app.command()
def match(
    game_name: str = typer.Argument("tictactoe", help="Game to play"),
    games: Optional[int] = typer.Option(None, "--games", "-n", help="Number of games"),
    iterations: Optional[int] = typer.Option(None, "--iterations", "-i", help="MCTS iterations per move"),
    opponent: str = typer.Option("random", "--opponent", "-o", help="random or mcts"),
    opponent_iterations: int = typer.Option(200, "--opponent-iterations", help="Opponent budget per move"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config YAML file"),
) -> None:
    """Play the engine against a baseline and report the score."""
    from .mcts import Mcts, RandomAgent
    from .play import Arena
    from .utils import Logger, create_progress, make_rng, print_config, set_seed

    game = _get_game_or_exit(game_name)
    config = _load_config(config_path)
    if games is not None:
        config.arena.num_games = games
    if iterations is not None:
        try:
            config.mcts = replace(config.mcts, max_iterations=iterations)
        except ValueError as e:
            console.print(f"[red]Error: {e}[/]")
            raise typer.Exit(1)

    set_seed(config.seed)
    print_config(config)
    logger = Logger(log_dir=config.log_dir)

    seeds = make_rng(config.seed)

    def next_rng():
        return make_rng(int(seeds.integers(2**32)))

    def engine(state):
        return Mcts(state, config.mcts, rng=next_rng())

    if opponent == "random":
        def baseline(state):
            return RandomAgent(state, max_iterations=opponent_iterations, rng=next_rng())
    elif opponent == "mcts":
        baseline_config = replace(config.mcts, max_iterations=opponent_iterations)

        def baseline(state):
            return Mcts(state, baseline_config, rng=next_rng())
    else:
        logger.log_error(f"Unknown opponent '{opponent}'. Choose: random, mcts")
        raise typer.Exit(1)

    arena = Arena(
        game,
        num_games=config.arena.num_games,
        alternate_colors=config.arena.alternate_colors,
        max_moves=config.arena.max_moves,
    )
    logger.log_info(f"Playing {config.arena.num_games} games of {game_name}: mcts vs {opponent}")

    with create_progress() as progress:
        task = progress.add_task("Match", total=config.arena.num_games)
        result = arena.evaluate(
            engine,
            baseline,
            progress_callback=lambda done, _: progress.update(task, completed=done),
        )

    table = Table(title=f"mcts vs {opponent}")
    table.add_column("Wins", style="green")
    table.add_column("Losses", style="red")
    table.add_column("Draws", style="yellow")
    table.add_column("Score", style="cyan")
    table.add_row(str(result.wins), str(result.losses), str(result.draws), f"{result.score:.2f}")
    console.print(table)


@app.command()
def analyse(
    game_name: str = typer.Argument(..., help="Game of the position"),
    moves: str = typer.Option("", "--moves", "-m", help="Moves from the start, space separated"),
    iterations: int = typer.Option(2000, "--iterations", "-i", help="MCTS iterations"),
    depth: int = typer.Option(2, "--depth", help="Tree levels to display"),
    seed: int = typer.Option(42, "--seed", help="Random seed"),
) -> None:
    """Search a position and print root statistics and the search tree."""
    from .mcts import ActionSelection, Mcts
    from .utils import MCTSConfig, Logger, build_tree, print_board, print_root_moves

    game = _get_game_or_exit(game_name)
    state = game.initial_state()

    for token in moves.replace(",", " ").split():
        try:
            action = game.parse_action(token)
            changed = state.apply_action(action)
        except ValueError as e:
            console.print(f"[red]Bad move '{token}': {e}[/]")
            raise typer.Exit(1)
        if not changed:
            console.print(f"[red]Move '{token}' is not legal here[/]")
            raise typer.Exit(1)

    print_board(state.render(), title=game_name)

    try:
        mcts_config = MCTSConfig(max_iterations=iterations, max_time=0, seed=seed)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    agent = Mcts(state, mcts_config)
    best = agent.best_action()
    if best is None:
        console.print("[yellow]Position is terminal - nothing to search[/]")
        return

    Logger().log_search(agent.report())
    print_root_moves(agent.root_moves_eval())
    console.print(build_tree(agent.tree_dict(depth)))

    line = agent.best_traversal(ActionSelection.BY_BEST_VALUE)
    console.print(f"Best line: {' '.join(game.format_action(a) for a in line)}")


if __name__ == "__main__":
    app()

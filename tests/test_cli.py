"""Smoke tests for the command-line interface."""

from typer.testing import CliRunner

from mctsgraph.cli import app

runner = CliRunner()


class TestCli:
    def test_list_games(self):
        result = runner.invoke(app, ["list-games"])
        assert result.exit_code == 0
        assert "tictactoe" in result.output
        assert "connect4" in result.output

    def test_analyse(self):
        result = runner.invoke(
            app, ["analyse", "tictactoe", "--moves", "0 3 1 4", "--iterations", "100"]
        )
        assert result.exit_code == 0
        assert "Best line" in result.output

    def test_analyse_terminal_position(self):
        result = runner.invoke(app, ["analyse", "tictactoe", "--moves", "0 3 1 4 2"])
        assert result.exit_code == 0
        assert "terminal" in result.output

    def test_analyse_illegal_move(self):
        result = runner.invoke(app, ["analyse", "tictactoe", "--moves", "4 4"])
        assert result.exit_code == 1

    def test_unknown_game(self):
        result = runner.invoke(app, ["analyse", "chess"])
        assert result.exit_code == 1

    def test_match(self):
        result = runner.invoke(
            app,
            [
                "match", "tictactoe",
                "--games", "2",
                "--iterations", "20",
                "--opponent-iterations", "10",
            ],
        )
        assert result.exit_code == 0
        assert "Wins" in result.output

    def test_match_unknown_opponent(self):
        result = runner.invoke(app, ["match", "tictactoe", "--opponent", "minimax"])
        assert result.exit_code == 1

    def test_play_against_engine(self):
        # Offer every cell in order; illegal choices are asked again
        moves = "\n".join(str(cell) for cell in list(range(9)) * 3) + "\n"
        result = runner.invoke(app, ["play", "tictactoe", "--difficulty", "easy"], input=moves)
        assert result.exit_code == 0
        assert any(end in result.output for end in ("You win!", "AI wins!", "Draw!"))

    def test_play_invalid_difficulty(self):
        result = runner.invoke(app, ["play", "tictactoe", "--difficulty", "brutal"])
        assert result.exit_code == 1

    def test_analyse_searches_once(self, monkeypatch):
        from mctsgraph.mcts import Mcts

        calls = []
        run = Mcts.run

        def counting_run(self):
            calls.append(self)
            run(self)

        monkeypatch.setattr(Mcts, "run", counting_run)
        result = runner.invoke(app, ["analyse", "tictactoe", "--iterations", "50"])
        assert result.exit_code == 0
        assert len(calls) == 1

    def test_analyse_without_budget(self):
        result = runner.invoke(app, ["analyse", "tictactoe", "--iterations", "0"])
        assert result.exit_code == 1
        assert "must be positive" in result.output

    def test_match_without_budget(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("mcts:\n  max_time: 0\n")
        result = runner.invoke(
            app, ["match", "tictactoe", "--config", str(config_file), "--iterations", "0"]
        )
        assert result.exit_code == 1
        assert "must be positive" in result.output

    def test_invalid_config_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("mcts:\n  max_iterations: 0\n  max_time: 0\n")
        result = runner.invoke(app, ["match", "tictactoe", "--config", str(config_file)])
        assert result.exit_code == 1

"""
Console Display Adapter

Formats evaluation results, scenarios and blueprints for the terminal.
"""
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from sdgame.domain.models import Component, EvaluationResult, Scenario


class Colors:
    """ANSI color codes for terminal output."""
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


class ConsoleDisplay:
    """Terminal rendering for the CLI."""
    Colors = Colors

    @staticmethod
    def colored(text: str, color: str, bold: bool = False) -> str:
        """Apply color to text."""
        style = Colors.BOLD if bold else ""
        return f"{style}{color}{text}{Colors.RESET}"

    @staticmethod
    def score_color(value: float) -> str:
        if value >= 80:
            return Colors.GREEN
        if value >= 50:
            return Colors.YELLOW
        return Colors.RED

    def print_header(self, title: str, char: str = "=", width: int = 78) -> None:
        """Print a formatted header."""
        print(f"\n{self.colored(char * width, Colors.CYAN)}")
        print(f"{self.colored(f' {title} '.center(width), Colors.CYAN, bold=True)}")
        print(f"{self.colored(char * width, Colors.CYAN)}")

    def print_subheader(self, title: str, char: str = "-", width: int = 78) -> None:
        """Print a formatted subheader."""
        print(f"\n{self.colored(f' {title} ', Colors.WHITE, bold=True)}")
        print(f"{self.colored(char * width, Colors.GRAY)}")

    # --- Evaluation Display ---

    def display_evaluation(self, result: "EvaluationResult") -> None:
        self.print_header(f"Design {result.design_id} @ t={result.elapsed_seconds:g}s")

        verdict = self.colored("PASS", Colors.GREEN, bold=True) if result.passed else self.colored("FAIL", Colors.RED, bold=True)
        total = self.colored(f"{result.total_score:.1f}", self.score_color(result.total_score), bold=True)
        print(f"  {'Scenario:':<20} {result.scenario_id}")
        print(f"  {'Total Score:':<20} {total}  {verdict}")

        self.print_subheader("Scores")
        for score in result.scores:
            value = self.colored(f"{score.value:6.1f}", self.score_color(score.value))
            print(f"  {score.dimension:<16} {value}  {self.colored(score.comment, Colors.GRAY)}")

        self.print_subheader("Metrics")
        print(f"  {'Offered QPS:':<20} {result.total_qps:.1f}")
        print(f"  {'Fulfilled QPS:':<20} {result.fulfilled_qps:.1f}")
        print(f"  {'Malicious QPS:':<20} {result.malicious_qps:.1f}")
        print(f"  {'Success Rate:':<20} {result.success_rate * 100:.2f}%")
        print(f"  {'Latency:':<20} {result.avg_latency_ms:.1f} ms")
        print(f"  {'Cost:':<20} ${result.operational_cost:.2f}/s")

        self.display_components(result)

    def display_components(self, result: "EvaluationResult") -> None:
        self.print_subheader("Components", width=90)
        header = f"  {'ID':<20} {'Load':>10} {'Potential':>10} {'Capacity':>10} {'Rep':>4} {'CPU':>6} {'RAM':>6}  Status"
        print(self.colored(header, Colors.WHITE, bold=True))
        print(f"  {'-' * 88}")
        for cid in sorted(result.potential_loads):
            capacity = result.effective_capacities.get(cid, float("inf"))
            cap_str = "inf" if capacity == float("inf") else f"{capacity:.0f}"
            if cid in result.crash_reasons:
                status = self.colored(f"CRASHED ({result.crash_reasons[cid]})", Colors.RED, bold=True)
            elif cid in result.active_component_ids:
                status = self.colored("active", Colors.GREEN)
            else:
                status = self.colored("idle", Colors.GRAY)
            print(
                f"  {cid[:20]:<20} {result.component_loads.get(cid, 0):>10.1f} "
                f"{result.potential_loads.get(cid, 0):>10.1f} {cap_str:>10} "
                f"{result.replica_counts.get(cid, 1):>4} {result.cpu_usage.get(cid, 0):>6.1f} "
                f"{result.ram_usage.get(cid, 0):>6.1f}  {status}"
            )
        for cid, backlog in sorted(result.backlogs.items()):
            if backlog > 0:
                print(f"  {self.colored('Backlog', Colors.YELLOW)} {cid}: {backlog:.0f} requests")

    def display_run(self, results: List["EvaluationResult"]) -> None:
        if not results:
            print(f"  {self.colored('No ticks evaluated.', Colors.GRAY)}")
            return
        self.print_header(f"Run of design {results[0].design_id}")
        header = f"  {'t (s)':>8} {'Score':>7} {'Offered':>10} {'Fulfilled':>10} {'Latency':>9} {'Crashed':>8}"
        print(self.colored(header, Colors.WHITE, bold=True))
        for r in results:
            score = self.colored(f"{r.total_score:7.1f}", self.score_color(r.total_score))
            print(
                f"  {r.elapsed_seconds:>8g} {score} {r.total_qps:>10.1f} "
                f"{r.fulfilled_qps:>10.1f} {r.avg_latency_ms:>9.1f} {len(r.crashed_component_ids):>8}"
            )
        passed = sum(1 for r in results if r.passed)
        print(f"\n  Passed {passed}/{len(results)} ticks")

    # --- Catalog Display ---

    def display_scenarios(self, scenarios: List["Scenario"]) -> None:
        self.print_header("Scenarios")
        for s in scenarios:
            print(f"\n  {self.colored(s.id, Colors.CYAN, bold=True)}  {s.title}")
            if s.description:
                print(f"    {self.colored(s.description, Colors.GRAY)}")
            g = s.goal
            print(f"    Goal: {g.min_qps:.0f} QPS, <= {g.max_latency_ms:.0f} ms, {g.availability}% for {g.duration}s")
            for p in s.phases:
                print(f"    - {p.name:<12} {p.start_qps:>8.0f} -> {p.end_qps:<8.0f} over {p.duration_seconds:g}s")
            if s.budget is not None:
                print(f"    Budget: ${s.budget:.2f}/s")

    def display_blueprints(self, components: List["Component"]) -> None:
        self.print_header("Component Blueprints")
        header = f"  {'ID':<18} {'Name':<26} {'Type':<20} {'Setup':>7} {'Run $/s':>8}"
        print(self.colored(header, Colors.WHITE, bold=True))
        for c in components:
            print(f"  {c.id:<18} {c.name:<26} {c.type.value:<20} {c.setup_cost:>7.0f} {c.operational_cost:>8.2f}")

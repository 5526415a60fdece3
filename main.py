"""
SUBCRACK - CLI entry point.
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from loguru import logger

from core.config import settings
from core.errors import SubcrackError
from cryptanalysis.frequency import char_frequency, count_unigrams, estimate_key
from cryptanalysis.reference import load_reference
from cryptanalysis.search import crack as crack_text
from cryptanalysis.substitution import SubstitutionCipher

logger.remove()
logger.add(
    sys.stderr,
    format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
    level=settings.LOG_LEVEL,
)
logger.add(settings.LOG_FILE, rotation="10 MB", retention="7 days", level="DEBUG")

app = typer.Typer(help="SUBCRACK - monoalphabetic substitution cipher breaker")
console = Console()


def _read_input(path: Optional[Path]) -> str:
    if path is None:
        return sys.stdin.read()
    if not path.exists():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


@app.command()
def crack(
    file: Optional[Path] = typer.Argument(None, help="Ciphertext file (stdin if omitted)"),
    iterations: int = typer.Option(settings.ITERATIONS, "--iterations", "-n", help="Iteration budget per chain"),
    keep_chance: float = typer.Option(settings.KEEP_CHANCE, "--keep-chance", "-k", help="Chance to accept a non-improving key"),
    seed: Optional[int] = typer.Option(settings.SEED, "--seed", "-s", help="Random seed"),
    chains: int = typer.Option(settings.CHAINS, "--chains", "-c", help="Independent search chains"),
    scorer: str = typer.Option(settings.SCORER, "--scorer", help="ngram | language"),
    patience: int = typer.Option(settings.PATIENCE, "--patience", help="Stop after N iterations without improvement (0 = off)"),
    reference: Optional[Path] = typer.Option(None, "--reference", "-r", help="Reference statistics file"),
):
    """Recover the key of a substitution cipher and print the decryption."""
    text = _read_input(file)
    if not text.strip():
        console.print("[yellow]No ciphertext given.[/yellow]")
        raise typer.Exit(0)
    try:
        result = crack_text(
            text,
            reference=reference,
            iterations=iterations,
            keep_chance=keep_chance,
            seed=seed,
            chains=chains,
            scorer=scorer,
            patience=patience,
        )
    except SubcrackError as e:
        console.print(f"[bold red]Failed:[/bold red] {e}")
        raise typer.Exit(1)
    table = Table(show_header=False)
    table.add_row("Key", str(result.key))
    table.add_row("Score", f"{result.score:.3f} ({result.scorer})")
    table.add_row("Initial", f"{result.initial_key} ({result.initial_score:.3f})")
    table.add_row("Iterations", f"{result.iterations} (accepted {result.accepted}, chain {result.chain})")
    console.print(table)
    console.print("[bold cyan]Best guess decrypted:[/bold cyan]")
    console.print(result.plaintext, markup=False, highlight=False, soft_wrap=True)


@app.command()
def encrypt(
    key: str = typer.Argument(..., help="26-letter key (plaintext a..z -> ciphertext)"),
    file: Optional[Path] = typer.Argument(None, help="Plaintext file (stdin if omitted)"),
):
    """Encrypt lowercased text with the given key."""
    _transform(key, file, decrypt=False)


@app.command()
def decrypt(
    key: str = typer.Argument(..., help="26-letter key (plaintext a..z -> ciphertext)"),
    file: Optional[Path] = typer.Argument(None, help="Ciphertext file (stdin if omitted)"),
):
    """Decrypt lowercased text with the given key."""
    _transform(key, file, decrypt=True)


def _transform(key: str, file: Optional[Path], decrypt: bool) -> None:
    try:
        cipher = SubstitutionCipher(key)
    except SubcrackError as e:
        console.print(f"[bold red]Invalid key:[/bold red] {e}")
        raise typer.Exit(1)
    text = _read_input(file).lower()
    out = cipher.decrypt(text) if decrypt else cipher.encrypt(text)
    console.print(out, markup=False, highlight=False, soft_wrap=True, end="")


@app.command()
def estimate(
    file: Optional[Path] = typer.Argument(None, help="Ciphertext file (stdin if omitted)"),
    reference: Optional[Path] = typer.Option(None, "--reference", "-r", help="Reference statistics file"),
):
    """Print the letter-frequency rank key and the letter shares it pairs up."""
    text = _read_input(file)
    try:
        stats = load_reference(reference)
        key = estimate_key(stats.unigrams, count_unigrams(text))
    except SubcrackError as e:
        console.print(f"[bold red]Failed:[/bold red] {e}")
        raise typer.Exit(1)
    console.print(str(key), highlight=False)
    observed = char_frequency(text)
    table = Table("Plain", "Reference %", "Cipher", "Observed %")
    for plain in sorted(stats.unigrams, key=stats.unigrams.get, reverse=True):
        cipher = key.cipher_letter(plain)
        table.add_row(
            plain,
            f"{100 * stats.unigrams[plain] / stats.letter_total:.2f}",
            cipher,
            f"{100 * observed.get(cipher, 0.0):.2f}",
        )
    console.print(table)


@app.command()
def health():
    """Check reference statistics and optional language detector."""
    console.print("[bold cyan]SUBCRACK Health Check[/bold cyan]\n")
    ok = True
    try:
        stats = load_reference()
        console.print(
            f"  [green]Reference[/green] {settings.REFERENCE_PATH.name}: "
            f"{len(stats.bigrams)} bigrams, {len(stats.trigrams)} trigrams OK"
        )
    except SubcrackError as e:
        console.print(f"  [red]Reference[/red] {e}")
        ok = False
    try:
        import langdetect  # noqa: F401
        console.print("  [green]langdetect[/green] OK")
    except ImportError as e:
        console.print(f"  [yellow]langdetect[/yellow] {e} (language scorer unavailable)")
    console.print("\n" + "=" * 50)
    if ok:
        console.print("[bold green]All systems operational.[/bold green]")
    else:
        console.print("[bold red]Some checks failed.[/bold red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()

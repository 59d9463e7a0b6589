"""
Lint script runner.
"""
import subprocess


def main():
    """
    Lint the Vim script front end using flake8 and pylint.
    """
    print("Running flake8...")
    subprocess.run([
        "flake8",
        "./vimscript",
        "./vimrun.py",
        "./vscode/server",
        "--max-line-length=110",
        "--exclude=vimscript/tests"
    ], check=True)

    print("Running pylint...")
    subprocess.run([
        "pylint",
        "./vimscript",
        "./vimrun.py",
        "--ignore=tests"
    ], check=True)


if __name__ == "__main__":
    main()

from typing import Optional, Tuple

from dotenv import load_dotenv

from settings import Settings


def diagnose_key(key: Optional[str]) -> Tuple[str, str]:
    key = (key or "").strip()
    if not key:
        return (
            "failure",
            "❌ FAILURE: Python cannot find 'GROQ_API_KEY'.\n"
            "Check: Did you name the file '.env' exactly? Is it in the same folder?",
        )
    if not key.startswith("gsk_"):
        return (
            "warning",
            f"⚠️ WARNING: Your key looks weird. It starts with '{key[:4]}...'\n"
            "Groq keys normally start with 'gsk_'. Check for typos.",
        )
    return "success", f"✅ SUCCESS: Key found!\nKey loaded: {key[:10]}... (hidden)"


def main() -> int:
    # Force reload of the .env file
    load_dotenv(override=True)
    level, message = diagnose_key(Settings().GROQ_API_KEY)

    print("\n--- DIAGNOSTIC REPORT ---")
    print(message)
    print("-------------------------\n")
    return 1 if level == "failure" else 0


if __name__ == "__main__":
    raise SystemExit(main())

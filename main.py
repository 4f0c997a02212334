from getpass import getpass
from core.params import ScryptParams, SecurityLevel, get_preset
from core.capabilities import environment_status, warn_if_insecure, estimate_time_ms, describe_preset
from core.hashing import hash_password, verify_password
from core.encoding import timing_safe_equal
from core.errors import ValidationError, EncodingError, DerivationFailure
from core.constants import APP_NAME, APP_VERSION, DEFAULT_SECURITY_LEVEL
from logic.authentication import create_login_params
import logging
import argparse
import json
import sys

logger = logging.getLogger(__name__)


class LevelBasedFormatter(logging.Formatter):
    FORMATS = {
        logging.DEBUG:    "%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d - %(message)s",
        logging.INFO:     "%(asctime)s [%(levelname)s] -  %(message)s",
        logging.WARNING:  "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        logging.ERROR:    "%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d - %(message)s",
        logging.CRITICAL: "%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d - %(message)s"
    }

    def format(self, record):
        fmt = self.FORMATS.get(record.levelno, self._fmt)
        formatter = logging.Formatter(fmt)
        return formatter.format(record)

def setup_logging(debug: bool) -> None:
    # stderr, so JSON written to stdout stays parseable
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(LevelBasedFormatter())
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.addHandler(handler)

def parse_args(argv=None):
    levels = [level.value for level in SecurityLevel]

    parser = argparse.ArgumentParser(prog=APP_NAME, description="Scrypt password hashing and double hashing login helpers")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("presets", help="Show security level presets with time estimates")
    sub.add_parser("capabilities", help="Show environment capabilities and recommendations")

    login = sub.add_parser("login-params", help="Issue login parameters (JSON)")
    login.add_argument("--level", choices=levels, default=DEFAULT_SECURITY_LEVEL)

    hsh = sub.add_parser("hash", help="Hash a password read from the terminal (JSON)")
    hsh_params = hsh.add_mutually_exclusive_group()
    hsh_params.add_argument("--level", choices=levels, default=DEFAULT_SECURITY_LEVEL)
    hsh_params.add_argument("--params", help='Custom parameters as JSON, e.g. {"N": 16384, "r": 8, "p": 1, "dkLen": 32}')
    hsh.add_argument("--salt", help="Hex salt (default: fresh random salt)")

    ver = sub.add_parser("verify", help="Verify a password read from the terminal")
    ver.add_argument("--hash", required=True, dest="expected_hash", help="Stored hex hash")
    ver.add_argument("--salt", required=True, help="Stored hex salt")
    ver_params = ver.add_mutually_exclusive_group()
    ver_params.add_argument("--level", choices=levels, default=DEFAULT_SECURITY_LEVEL)
    ver_params.add_argument("--params", help="Stored parameters as JSON (the \"params\" object printed by hash)")

    est = sub.add_parser("estimate", help="Estimate hashing time for custom parameters")
    est.add_argument("--n", type=int, required=True, help="Cost factor (power of 2)")
    est.add_argument("--r", type=int, default=8, help="Block size")
    est.add_argument("--p", type=int, default=1, help="Parallelism")
    est.add_argument("--dk-len", type=int, default=32, help="Derived key length")

    return parser.parse_args(argv)


def load_params(raw: str) -> ScryptParams:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError("params", f"not valid JSON ({e.msg})") from None

    return ScryptParams.from_dict(data)


def run(args) -> int:
    if args.cmd == "presets":
        for level in SecurityLevel:
            info = describe_preset(level)
            params = info["params"]
            print(f"{level.value:<12} N=2^{params['N'].bit_length() - 1:<3} r={params['r']} p={params['p']} dkLen={params['dkLen']}  ~{info['estimated_ms']}ms  {info['memory_bytes'] // (1024 * 1024)}MB")
        return 0

    if args.cmd == "capabilities":
        print(json.dumps(environment_status(), indent=2))
        return 0

    if args.cmd == "login-params":
        print(json.dumps(create_login_params(args.level).to_dict()))
        return 0

    if args.cmd == "estimate":
        params = ScryptParams(n=args.n, r=args.r, p=args.p, dk_len=args.dk_len)
        params.validate()
        print(f"~{estimate_time_ms(params)}ms")
        return 0

    warn_if_insecure()
    params = load_params(args.params) if args.params else get_preset(args.level)

    if args.cmd == "hash":
        password = getpass("Password: ")
        confirm = getpass("Confirm password: ")
        if not timing_safe_equal(password, confirm):
            print("Error: passwords do not match.", file=sys.stderr)
            return 2

        print(json.dumps(hash_password(password, args.salt, params).to_dict()))
        return 0

    password = getpass("Password: ")
    if verify_password(password, args.expected_hash, args.salt, params):
        print("Password OK")
        return 0

    print("Password does not match", file=sys.stderr)
    return 1


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.debug)

    try:
        return run(args)
    except (ValidationError, EncodingError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except DerivationFailure as e:
        logger.error("Hashing failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""The Command Line Interface for blockrsa, including Interactive elements.

A hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface): any argument missing from the command
line is asked for interactively, unless non-interactive mode is on, in which case defaults are used or the run fails.

Typical usage example:

    blockrsa keygen -p alice.pub -P alice.key --prime-bits 64
    python -m blockrsa encrypt -p alice.pub --message "Hi there!"
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import logging
import pathlib
import sys
import typing

import blockrsa
from blockrsa import attacks
from blockrsa import codec
from blockrsa import keygen
from blockrsa import rsa


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None
    advanced: bool = False


help_dict: dict[str, HelpData] = {
    "subcommand":
        HelpData(
            description="The available subcommands in blockrsa.",
            choices=["keygen", "encrypt", "decrypt", "crack"],
        ),
    "keygen":
        HelpData("Key generation utility."),
    "encrypt":
        HelpData("Encryption utility."),
    "decrypt":
        HelpData("Decryption utility."),
    "crack":
        HelpData("Decrypts with only the public key, by factoring the modulus."),
    "public_key":
        HelpData(
            description="Location of the public key file.",
            format=pathlib.Path,
        ),
    "private_key":
        HelpData(
            description="Location of the private key file.",
            format=pathlib.Path,
        ),
    "message":
        HelpData(
            description="Message or path to file containing payload. If Path start with `P:`",
            format=str,
        ),
    "prime_bits":
        HelpData(
            description="Size of each prime (in bits). Larger sizes are much slower.",
            choices=[str(b) for b in keygen.PRIME_BITS_MENU],
            default=str(keygen.PRIME_BITS_MENU[0]),
        ),
    "pub_exponent":
        HelpData(
            description="First public exponent to try.",
            format=int,
            advanced=True,
            default=keygen.DEFAULT_PUBLIC_EXPONENT,
        ),
    "codec":
        HelpData(
            description="Block codec. Length-prefixed is lossless but not compatible with lossy ciphertexts.",
            choices=sorted(codec.CODECS),
            advanced=True,
            default=codec.LOSSY.name,
        ),
    "overwrite":
        HelpData(
            description="Overwrite specified destination files if they exist?",
            choices=["Y", "N"],
            default="N",
        )
}

needs = {
    "keygen": ("public_key", "private_key", "prime_bits", "pub_exponent"),
    "encrypt": ("public_key", "message", "codec"),
    "decrypt": ("private_key", "message", "codec"),
    "crack": ("public_key", "message", "codec"),
}

pubkey = argparse.ArgumentParser(add_help=False)
pubkey.add_argument("--public_key", "-p", type=help_dict["public_key"].format, help=help_dict["public_key"].description)
privkey = argparse.ArgumentParser(add_help=False)
privkey.add_argument("--private_key",
                     "-P",
                     type=help_dict["private_key"].format,
                     help=help_dict["private_key"].description)
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--message", type=help_dict["message"].format, help=help_dict["message"].description)
codecp = argparse.ArgumentParser(add_help=False)
codecp.add_argument("--codec", "-c", choices=help_dict["codec"].choices, help=help_dict["codec"].description)
corep = argparse.ArgumentParser(prog="blockrsa")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {blockrsa.__version__}")
corep.add_argument("--non-interactive", "-n", action="store_true", help="Enable non-interactive mode")
corep.add_argument("--advanced", "-a", action="store_true", help="Enable advanced mode, for interactive mode")
corep.add_argument("--log-level",
                   "-L",
                   default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Logging verbosity")
corep.add_argument("--verbose",
                   "-V",
                   dest="log_level",
                   action="store_const",
                   const="DEBUG",
                   help="Shorthand for --log-level DEBUG")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands")

keygen_cmd = commands.add_parser("keygen", parents=[privkey, pubkey], help=help_dict["keygen"].description)
keygen_cmd.add_argument("--prime-bits", choices=help_dict["prime_bits"].choices, help=help_dict["prime_bits"].description)
keygen_cmd.add_argument("--pub-exponent",
                        type=help_dict["pub_exponent"].format,
                        help=help_dict["pub_exponent"].description)
keygen_cmd.add_argument("--overwrite", "-o", action="store_const", const="Y", help=help_dict["overwrite"].description)

commands.add_parser("encrypt", parents=[pubkey, payloads, codecp], help=help_dict["encrypt"].description)
commands.add_parser("decrypt", parents=[privkey, payloads, codecp], help=help_dict["decrypt"].description)
commands.add_parser("crack", parents=[pubkey, payloads, codecp], help=help_dict["crack"].description)


_UNSET = object()


def fallback_value(arg: str, mode: tuple[bool, bool]) -> typing.Any:
    """Returns the value used for `arg` without prompting, or `_UNSET` if the user has to be asked.

    Non-interactive runs take the default of every missing argument. Interactive runs take the default only for
    advanced arguments, unless advanced mode (`-a`) asks for those too.

    Raises:
        IOError: If a non-interactive run is missing an argument without a default.
    """
    noninteractive, advanced = mode
    default = help_dict[arg].default
    if default is not None and (noninteractive or (help_dict[arg].advanced and not advanced)):
        return default
    if noninteractive:
        raise IOError(f"Argument {arg} is missing and non-interactive mode is active.")
    return _UNSET


def _describe(arg: str, prntr: typing.Callable) -> None:
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + help_dict[arg].description)


def prompt_choice(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print) -> str:
    """Resolves a missing menu argument (subcommand, prime size, codec...), asking until a listed option is typed."""
    value = fallback_value(arg, mode)
    if value is not _UNSET:
        return value
    data = help_dict[arg]
    _describe(arg, prntr)
    for option in data.choices:
        line = f"{option} - {help_dict[option].description}" if option in help_dict else option
        prntr(line + (" (Default)" if option == data.default else ""))
    if data.default is not None:
        prntr("To accept default just click enter. Otherwise specify value.")
    while (answer := input(f"{arg}: ")) not in data.choices:
        if not answer and data.default is not None:
            return data.default
        prntr("Please select an option from the list.")
    return answer


def prompt_value(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print) -> typing.Any:
    """Resolves a missing free-form argument, converting the answer with the argument's `format`."""
    value = fallback_value(arg, mode)
    if value is not _UNSET:
        return value
    data = help_dict[arg]
    _describe(arg, prntr)
    if data.default is not None:
        prntr(f"Default value: {data.default}")
        prntr("To accept default just click enter. Otherwise specify value.")
    while True:
        answer = input(f"{arg}: ")
        if not answer:
            if data.default is not None:
                return data.default
            prntr("Please provide a value.")
            continue
        try:
            return data.format(answer)
        except ValueError:
            prntr(f"We could not convert your value to {data.format.__name__}.")


def load_message(raw: str, enc: str = "utf-8") -> str:
    """Returns the payload itself, or the contents of the file it names when prefixed with `P:`."""
    if not raw.startswith("P:"):
        return raw
    return pathlib.Path(raw[2:]).read_text(encoding=enc)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main(argv: list[str] | None = None):
    """Core Hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface)"""
    args = corep.parse_args(argv)
    configure_logging(args.log_level)
    pstatus = (args.non_interactive, args.advanced)

    def pspr(text: str):
        """Print only if not in non-interactive mode."""
        if not pstatus[0]:
            print(text)

    pspr("Welcome to blockrsa!\n")
    if not args.subcommand:
        args.subcommand = prompt_choice("subcommand", pstatus)
    for arg in needs[args.subcommand]:
        given = getattr(args, arg, None)
        if given is not None:
            pspr(f"{arg}: {given}")
            continue
        prompt = prompt_value if help_dict[arg].choices is None else prompt_choice
        setattr(args, arg, prompt(arg, pstatus))
    pspr("\nInput Complete! Executing...")
    match args.subcommand:
        case "keygen":
            if args.private_key.exists() or args.public_key.exists():
                rs = getattr(args, "overwrite", None)
                if rs is None:
                    rs = prompt_choice("overwrite", pstatus, pspr)
                if rs == "N":
                    print("Destination private or public key already exists!")
                    return
            pair = keygen.generate_key_pair(int(args.prime_bits), args.pub_exponent, expose_primes=True)
            pair.private_key.export(args.private_key)
            pair.public_key.export(args.public_key)
            pspr("\nKey pair generated!")
        case "encrypt":
            message = load_message(args.message)
            pub = blockrsa.PublicKey.import_key(args.public_key)
            ciph = rsa.encrypt(message, pub, codec.get_codec(args.codec))
            pspr("Ciphertext:")
            print(ciph)
        case "decrypt" | "crack":
            ciphertext = load_message(args.message, "ascii").strip()
            chosen = codec.get_codec(args.codec)
            if args.subcommand == "crack":
                key = attacks.recover_private_key(blockrsa.PublicKey.import_key(args.public_key))
            else:
                key = blockrsa.PrivateKey.import_key(args.private_key)
            result = rsa.decrypt_result(ciphertext, key, chosen)
            if not result:
                print(result.text)
                sys.exit(1)
            pspr("Cleartext:")
            print(result.text)
    pspr("Thank you for using blockrsa!")
    pspr("Goodbye!")


if __name__ == "__main__":
    main()

"""
Application entry point for Chalet BnB.

This module:
- Configures logging from infrastructure.config.settings.
- Initializes the MongoEngine connection (via data.mongo_setup.global_init).
- Prints the application header.
- Runs the front desk loop (program_staff) until the user exits.
"""

from colorama import Fore, init as colorama_init

import chalet_bnb.data.mongo_setup as mongo_setup
import chalet_bnb.program_staff as program_staff
from chalet_bnb.infrastructure.config import settings
from chalet_bnb.infrastructure.logging_config import setup_logging


def main():
    colorama_init()
    setup_logging(settings.log_level, settings.log_file)
    mongo_setup.global_init(settings)

    print_header()

    try:
        program_staff.run()
    except KeyboardInterrupt:
        return
    finally:
        mongo_setup.global_close()


def print_header():
    chalet = \
        """
              /\\
             /  \\    /\\
            /    \\  /  \\
           /  []  \\/    \\
          /________\\  [] \\
          |  _  _  |______|
          | | || | |  __  |
          |_|_||_|_|_|__|_| """

    print(Fore.WHITE + '****************  CHALET BnB  ****************')
    print(Fore.GREEN + chalet)
    print(Fore.WHITE + '**********************************************')
    print()
    print("Welcome to the Chalet BnB front desk!")
    print()


if __name__ == '__main__':
    main()

import termcolor


def bold_red(txt: str) -> str:
    return termcolor.colored(txt, 'red', attrs=['bold'])


def bold_yellow(txt: str) -> str:
    return termcolor.colored(txt, 'yellow', attrs=['bold'])

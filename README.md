# sysplay

Small operating-systems exercises you can run from the command line: a
pseudo shell, CPU- and I/O-bound workload generators, process launchers
driven by signals, round-robin schedulers, and a bank ledger processed by
one or many threads.

The launcher and scheduler tools use POSIX signals, `fork` and `/proc`, so
they are meant for Linux. There are no dependencies beyond the standard
library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The pseudo shell

```
sysplay-shell            # interactive, prompts with >>>
sysplay-shell -f cmds    # reads commands from a file, writes output.txt
```

Commands on a line are separated by `;` and arguments by spaces.
Supported commands: `ls`, `pwd`, `mkdir DIR`, `cd DIR`, `cp SRC DEST`,
`mv SRC DEST`, `rm FILE`, `cat FILE` and `exit`. `cp` into an existing
directory keeps the source's file name. Unknown commands and failed
operations print an error message and the shell carries on. In file mode
all output goes to `output.txt` in the current directory, and the shell
finishes at the end of the file with `End of file` and `Bye Bye!`.

From Python, `sysplay.shell.Shell(out)` offers `execute(tokens)`,
`execute_line(line)` and `run(source, interactive)`. The operations
themselves are functions in `sysplay.commands` (`list_dir`,
`show_current_dir`, `make_dir`, `change_dir`, `copy_file`, `move_file`,
`delete_file`, `display_file`); failures raise `CommandError`.
`sysplay.tokenizer` provides `count_tokens` and `split_tokens`, which
split on runs of any of the given delimiter characters.

## Workloads

```
sysplay-cpubound -seconds 10
sysplay-iobound -seconds 3
```

Each runs until the given amount of CPU time has been used and prints its
process id when it starts and when it finishes. The defaults are 30
seconds for the CPU-bound workload and 5 for the I/O-bound one, which
writes its lines to the null device. Any other flag is rejected.

## Launching and scheduling processes

All of these take a file with one command per line, arguments separated
by spaces:

```
sysplay-launch commands.txt            # start every command, wait for all
sysplay-signalled commands.txt         # hold each child, then send SIGUSR1,
                                       # SIGSTOP, SIGCONT and SIGINT, 3 s apart
sysplay-roundrobin commands.txt        # one-second round-robin time slices
sysplay-roundrobin-report commands.txt # three-second slices with a /proc report
sysplay-weighted commands.txt          # slice length depends on the command
```

The schedulers stop and resume children with SIGSTOP and SIGCONT. A
child whose command cannot be started reports back and counts as finished
unsuccessfully. The report shows selected lines of `/proc/<pid>/status`
(Name, State, VmSize, VmPeak, Threads, PPid), the time since the slice
began and the process's CPU time.

`sysplay-weighted` decides a command's slice from its program name: lines
running `./cpubound` get 5 seconds, `./iobound` 3 seconds, and anything
else 1 second. From Python, `sysplay.weighted` exposes `JobKind`,
`classify`, `quantum_for` and `allocation_summary`, and
`sysplay.roundrobin.RoundRobin` can be run directly over a list of `Job`s
or argument lists.

## The bank ledger

The bank tools read an input file that starts with the number of
accounts, then five lines per account (a heading line, the account
number, the password, the opening balance and the reward rate), followed
by one transaction per line:

```
C <account> <password>                  check balance
D <account> <password> <amount>         deposit
W <account> <password> <amount>         withdraw
T <account> <password> <to> <amount>    transfer
```

For example:

```
1
index 0
acct-0001
password
100.00
0.02
D acct-0001 password 25
C acct-0001 password
```

```
sysplay-ledger input.txt                 # single thread
sysplay-bank-partitioned input.txt       # ten worker threads, one final update
sysplay-bank-periodic input.txt          # rewards applied every 5000 transactions
sysplay-bank-savings input.txt           # as above, plus savings accounts
```

Transactions with a wrong password are ignored; an unknown account number
is reported. Each withdrawal, deposit and outgoing transfer adds to the
account's tracked activity, and a reward update adds `reward_rate` times
that activity to the balance and resets it.

Each run writes a heading for every account to `outputs/accountN.txt` and
the final balances, to two decimal places, to `output.txt`.

- `sysplay-ledger` applies transactions in order and rewards once at the
  end; `C` appends the current balance to the account's file.
- `sysplay-bank-partitioned` splits the transactions into ten equal
  consecutive chunks, one per thread, and rewards once when all threads
  are done. Lines left over after the equal split are not processed.
- `sysplay-bank-periodic` always reads ten accounts. Workers pause after
  every 5000 applied transactions while a bank thread applies rewards and
  appends each balance to its account file; a final update runs when the
  last worker finishes. `C` is checked but writes nothing.
- `sysplay-bank-savings` works like the periodic bank, and also sets aside
  20% of each opening balance in `savings/accountN.txt`, grows it by 2% at
  every reward update, and writes `savings_output.txt`.

The building blocks are in `sysplay.ledger` (`Account`, `Bank`,
`parse_input`), `sysplay.threaded_bank` (`partition`, `run_partitioned`,
`run_periodic`, `PeriodicUpdater`) and `sysplay.savings`
(`SavingsLedger`, `initial_savings`, `run_with_savings`).

## Limitations

The savings accounts are kept by a ledger in the same process as the
bank, not by a separate process. The process tools need Linux: they rely
on `fork`, POSIX signals and `/proc`, and do not work on other systems.
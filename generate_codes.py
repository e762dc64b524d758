# generate_codes.py - unique coupon codes from a pattern, exported to CSV
import argparse, csv, logging, secrets, sys

OUT_CSV = "coupons.csv"
PATTERN = "AA-DDDD-AA"
COUNT = 10000

# no 6 / 9, too close to 8
ALLOWED_DIGITS = "01234578"
# no E, F, U, V, I, O (read as digits or as each other)
ALLOWED_LETTERS = "ABCDGHJKLMNPQRSTWXYZ"
ALLOWED_SYMBOLS = "!@#$%"

# A = letter, D = digit, S = symbol; anything else is copied as-is
CHARSETS = {
	"A": ALLOWED_LETTERS,
	"D": ALLOWED_DIGITS,
	"S": ALLOWED_SYMBOLS,
}

log = logging.getLogger("generate_codes")


class CouponError(Exception):
	pass


class CapacityExceeded(CouponError):
	def __init__(self, pattern: str, amount: int, max_possible: int):
		self.pattern = pattern
		self.amount = amount
		self.max_possible = max_possible
		super().__init__(
			f"can't generate {amount} unique coupons with pattern '{pattern}'. "
			f"Max possible: {max_possible}"
		)


class RandomSourceError(CouponError):
	pass


class AttemptsExhausted(CouponError):
	def __init__(self, attempts: int, collected: int, amount: int):
		self.attempts = attempts
		self.collected = collected
		self.amount = amount
		super().__init__(
			f"gave up after {attempts} draws with {collected} of {amount} unique coupons"
		)


def random_char(charset: str) -> str:
	if not charset:
		raise ValueError("character set is empty")
	try:
		i = secrets.randbelow(len(charset))
	except (OSError, NotImplementedError) as e:
		raise RandomSourceError(f"secure random source failed: {e}") from e
	return charset[i]


def gen_code(pattern: str = PATTERN) -> str:
	return "".join(
		random_char(CHARSETS[ch]) if ch in CHARSETS else ch
		for ch in pattern
	)


def max_combinations(pattern: str = PATTERN) -> int:
	# upper bound on distinct codes; literals count as 1
	total = 1
	for ch in pattern:
		if ch in CHARSETS:
			total *= len(CHARSETS[ch])
	return total


def build_pool(pattern: str = PATTERN, n: int = COUNT, max_attempts=None) -> list:
	"""Draw codes until ``n`` distinct ones are collected.

	Codes come back in the order they were first drawn. Raises
	CapacityExceeded up front when the pattern cannot hold ``n`` codes.
	``max_attempts`` caps the number of draws (None = no cap) and raises
	AttemptsExhausted when hit; the partial pool is dropped.
	"""
	if n < 0:
		raise ValueError(f"amount must not be negative, got {n}")
	max_possible = max_combinations(pattern)
	if n > max_possible:
		raise CapacityExceeded(pattern, n, max_possible)

	seen = set()
	out = []
	attempts = 0
	while len(out) < n:
		if max_attempts is not None and attempts >= max_attempts:
			raise AttemptsExhausted(attempts, len(out), n)
		c = gen_code(pattern)
		attempts += 1
		if c in seen:
			continue
		seen.add(c)
		out.append(c)
	log.debug("%d draws for %d codes (%d duplicates dropped)", attempts, n, attempts - n)
	return out


def export_csv(codes, path=OUT_CSV):
	# one single-field record per line, no header
	with open(path, "w", newline="", encoding="utf-8") as f:
		writer = csv.writer(f, lineterminator="\n")
		for c in codes:
			writer.writerow([c])


def read_csv(path=OUT_CSV) -> list:
	with open(path, newline="", encoding="utf-8") as f:
		return [row[0] for row in csv.reader(f) if row]


def parse_args(argv=None):
	p = argparse.ArgumentParser(description="Generate a pool of unique coupon codes.")
	p.add_argument("--pattern", default=PATTERN,
				   help="A = letter, D = digit, S = symbol, other characters are literal (default: %(default)s)")
	p.add_argument("--count", type=int, default=COUNT,
				   help="number of unique codes (default: %(default)s)")
	p.add_argument("--output", default=OUT_CSV,
				   help="CSV file to write (default: %(default)s)")
	p.add_argument("--max-attempts", type=int, default=None,
				   help="give up after this many draws (default: no limit)")
	p.add_argument("-v", "--verbose", action="store_true")
	return p.parse_args(argv)


def main(argv=None) -> int:
	args = parse_args(argv)
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.INFO,
		format="%(asctime)s %(levelname)s %(message)s",
	)

	try:
		pool = build_pool(args.pattern, args.count, args.max_attempts)
	except (CouponError, ValueError) as e:
		log.error("Error: %s", e)
		return 1

	try:
		export_csv(pool, args.output)
	except OSError as e:
		log.error("Failed to export coupons to CSV: %s", e)
		return 1

	log.info("Saved %s with %d codes.", args.output, len(pool))
	return 0


if __name__ == "__main__":
	sys.exit(main())

if __name__ == '__main__':
    from gitarbor.graph import *
    from argparse import ArgumentParser

    parser = ArgumentParser(description="gitarbor ASCII graph tool")
    parser.add_argument("definition", help="Graph definition (e.g.: \"u:z i:b m:a,b a:z b-c-z\")", nargs="+")
    parser.add_argument("-x", "--hide", nargs="*", default=[])
    parser.add_argument("-n", "--max-rows", type=int, default=20)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    definition = " ".join(args.definition)
    sequence, parentMap, heads = GraphDiagram.parseDefinition(definition)

    assert all(c in sequence for c in args.hide), "one of the given hidden commits isn't in the graph"

    if args.verbose:
        print("Heads:", " ".join(sorted(heads)))

    diagram = GraphDiagram.diagram(sequence, parentMap, maxRows=args.max_rows,
                                   hiddenCommits=set(args.hide), verbose=args.verbose)
    print(diagram)

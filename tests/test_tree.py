"""Tests for the commitment builder."""

import random

import pytest

from merkle_vesting.encoding import hash_pair, leaf_hash, verify_proof
from merkle_vesting.exceptions import InvalidInput
from merkle_vesting.tree import Entitlement, MerkleTree, build

from .conftest import ADDR1, ADDR2, ADDR3, ADDR6


class TestMerkleTree:
    def test_single_leaf_is_root(self):
        leaf = leaf_hash(ADDR1, 1000)
        tree = MerkleTree([leaf])
        assert tree.root == leaf
        assert tree.get_proof(0) == []

    def test_two_leaves(self):
        a, b = leaf_hash(ADDR1, 1000), leaf_hash(ADDR2, 2000)
        tree = MerkleTree([a, b])
        assert tree.root == hash_pair(a, b)
        assert tree.get_proof(tree.index_of(a)) == [b]

    def test_odd_node_is_promoted_unhashed(self):
        """Three leaves: the largest leaf is carried up, not hashed with itself."""
        leaves = sorted([leaf_hash(ADDR1, 1000), leaf_hash(ADDR2, 2000), leaf_hash(ADDR3, 1000)])
        l0, l1, l2 = leaves
        tree = MerkleTree(leaves)

        assert tree.layers[1] == [hash_pair(l0, l1), l2]
        assert tree.root == hash_pair(hash_pair(l0, l1), l2)
        assert tree.root != hash_pair(hash_pair(l0, l1), hash_pair(l2, l2))
        assert tree.get_proof(2) == [hash_pair(l0, l1)]
        assert tree.get_proof(0) == [l1, l2]

    def test_leaves_are_sorted(self):
        leaves = [leaf_hash(a, 1) for a in (ADDR1, ADDR2, ADDR3, ADDR6)]
        tree = MerkleTree(list(reversed(leaves)))
        assert tree.leaves == sorted(leaves)

    def test_empty_tree_rejected(self):
        with pytest.raises(InvalidInput):
            MerkleTree([])

    def test_unknown_leaf(self):
        tree = MerkleTree([leaf_hash(ADDR1, 1000)])
        with pytest.raises(InvalidInput):
            tree.index_of(leaf_hash(ADDR2, 1000))


class TestBuild:
    def test_every_entitlement_verifies(self, commitment, entitlements):
        for ent in entitlements:
            proof = commitment.get_proof(ent)
            assert verify_proof(proof, commitment.root, ent.leaf)
            assert commitment.verify(ent, commitment.get_hex_proof(ent))

    def test_five_leaf_shape(self, commitment):
        """5 leaves -> layers of 5, 3, 2, 1; the promoted fifth leaf has a one-hash proof."""
        assert [len(layer) for layer in commitment.tree.layers] == [5, 3, 2, 1]
        assert len(commitment.tree.get_proof(4)) == 1
        assert all(len(commitment.tree.get_proof(i)) == 3 for i in range(4))

    def test_tampered_amount_fails(self, commitment):
        proof = commitment.get_proof((ADDR1, 1000))
        assert not verify_proof(proof, commitment.root, leaf_hash(ADDR1, 2000))

    def test_outsider_fails(self, commitment):
        proof = commitment.get_proof((ADDR1, 1000))
        assert not verify_proof(proof, commitment.root, leaf_hash(ADDR6, 1000))

    def test_proof_for_missing_entitlement(self, commitment):
        with pytest.raises(InvalidInput):
            commitment.get_proof((ADDR6, 1000))
        with pytest.raises(InvalidInput):
            commitment.get_proof((ADDR1, 2000))

    def test_root_independent_of_input_order(self, entitlements):
        roots = set()
        rng = random.Random(7)
        for _ in range(5):
            shuffled = entitlements[:]
            rng.shuffle(shuffled)
            roots.add(build(shuffled).root)
        assert roots == {build(entitlements).root}

    def test_accepts_plain_tuples(self, commitment):
        tuples = [
            (ADDR1, 1000),
            ("0x3c44cdddb6a900fa2b585dd299e03d12fa4293bc", "2000"),
            (ADDR3, 1000),
            ("0x15d34AAf54267DB7D7c367839AAf71A00a2C6A65", 5000),
            ("0x9965507D1a55bcC2695C58ba16FB37d819B0A4dc", 7000),
        ]
        assert build(tuples).root == commitment.root

    def test_empty_list_rejected(self):
        with pytest.raises(InvalidInput):
            build([])

    def test_duplicate_address_rejected(self):
        with pytest.raises(InvalidInput) as exc:
            build([(ADDR1, 1000), (ADDR2, 5), (ADDR1.lower(), 3000)])
        assert exc.value.value == ADDR1

    def test_total_and_hex_root(self, commitment):
        assert commitment.total_amount == 16000
        assert commitment.hex_root == "0x" + commitment.root.hex()
        assert len(commitment.root) == 32

    def test_entitlements_follow_leaf_order(self, commitment):
        assert [commitment.index_of(e) for e in commitment.entitlements] == [0, 1, 2, 3, 4]

    def test_same_address_new_amount_in_new_generation(self, commitment):
        regenerated = build([(ADDR1, 4000), (ADDR2, 2000)])
        assert regenerated.root != commitment.root
        assert regenerated.verify((ADDR1, 4000), regenerated.get_proof((ADDR1, 4000)))


class TestEntitlement:
    def test_normalizes_fields(self):
        ent = Entitlement(ADDR1.lower(), "1000")
        assert ent.address == ADDR1
        assert ent.amount == 1000
        assert ent == Entitlement(ADDR1, 1000)

    def test_rejects_negative_amount(self):
        with pytest.raises(InvalidInput):
            Entitlement(ADDR1, -1)


class TestKnownRoots:
    """Roots of the hardhat-account generations under keccak256 with sorted leaves and pairs."""

    def test_leaf(self):
        expected = "0x26645f3986e3d4ce970b0b32ae1c4184aff649905c6e3b2321f5c13b487674fc"
        assert "0x" + leaf_hash(ADDR1, 1000).hex() == expected

    def test_five_recipient_root(self, commitment):
        expected = "0x8806b5d05d1dca653ebf581152375e362cd2d3b11a6712f11f4b58a529d27a64"
        assert commitment.hex_root == expected

    def test_four_recipient_root(self, second_generation):
        expected = "0x59fe4f774a2d9f74382de3d88d88eb52eeeeef7113a65601521f4717069782ab"
        assert build(second_generation).hex_root == expected
